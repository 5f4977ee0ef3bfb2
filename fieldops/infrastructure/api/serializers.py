"""Domain → API response dicts."""

from __future__ import annotations

from datetime import date, datetime

from fieldops.application.use_cases.cascade_delete import DeletionResult
from fieldops.domain.entities.calendar_event import DisplayEvent
from fieldops.domain.entities.client import Client
from fieldops.domain.entities.document import Document
from fieldops.domain.entities.module import Module, ModuleType
from fieldops.domain.entities.ticket import Ticket
from fieldops.domain.policies.route_links import RouteLinks
from fieldops.domain.value_objects.geo_point import GeoPoint


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


def _point(p: GeoPoint | None) -> dict | None:
    return {"lat": p.latitude, "lng": p.longitude} if p else None


def serialize_client(c: Client) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "fantasy_name": c.fantasy_name,
        "email": c.email,
        "phone": c.phone,
        "secondary_phone": c.secondary_phone,
        "website": c.website,
        "address": c.address,
        "country": c.country,
        "province": c.province,
        "city": c.city,
        "zip_code": c.zip_code,
        "tax_id": c.tax_id,
        "tax_condition": c.tax_condition,
        "notes": c.notes,
        "created_at": _iso(c.created_at),
    }


def serialize_module_type(t: ModuleType) -> dict:
    return {
        "id": t.id,
        "name": t.name,
        "description": t.description,
        "image_url": t.image_url,
        "created_at": _iso(t.created_at),
    }


def serialize_module(m: Module) -> dict:
    return {
        "id": m.id,
        "client_id": m.client_id,
        "client_name": m.client_name,
        "module_type_id": m.module_type_id,
        "model_name": m.model_name,
        "serial_number": m.serial_number,
        "installation_date": _iso(m.installation_date),
        "delivery_date": _iso(m.delivery_date),
        "warranty_expiration": _iso(m.warranty_expiration),
        "location": _point(m.location),
        "address": m.address,
    }


def serialize_ticket(t: Ticket) -> dict:
    return {
        "id": t.id,
        "client_id": t.client_id,
        "client_name": t.client_name,
        "module_id": t.module_id,
        "module_serial": t.module_serial,
        "title": t.title,
        "description": t.description,
        "status": t.status.value,
        "priority": t.priority.value,
        "affected_part": t.affected_part,
        "created_at": _iso(t.created_at),
        "scheduled_date": _iso(t.scheduled_date),
        "photos": t.photos,
        "audio_url": t.audio_url,
        "closure_description": t.closure_description,
        "closure_photos": t.closure_photos,
        "closure_audio_url": t.closure_audio_url,
        "invoices": t.invoices,
        "location": _point(t.location),
        "address": t.address,
        "warranty_expiration": _iso(t.warranty_expiration),
        "out_of_warranty": t.is_out_of_warranty(),
    }


def serialize_document(d: Document) -> dict:
    return {
        "id": d.id,
        "name": d.name,
        "type": d.type.value,
        "version": d.version,
        "url": d.url,
        "uploaded_at": _iso(d.uploaded_at),
        "module_id": d.module_id,
        "module_type_id": d.module_type_id,
        "client_id": d.client_id,
        "module_serial": d.module_serial,
        "client_name": d.client_name,
    }


def serialize_display_event(e: DisplayEvent) -> dict:
    return {
        "title": e.title,
        "start": _iso(e.start),
        "end": _iso(e.end),
        "all_day": e.all_day,
        "source": e.source.value,
        "id": e.ref_id,
        "link": e.link,
    }


def serialize_route_links(links: RouteLinks) -> dict:
    return {
        "origin": _point(links.origin),
        "destination": _point(links.destination),
        "waypoints": [_point(p) for p in links.waypoints],
        "embed_url": links.embed_url,
        "navigation_url": links.navigation_url,
        "single_place": links.is_single_place,
    }


def serialize_deletion(r: DeletionResult) -> dict:
    return {
        "entity": r.entity,
        "id": r.entity_id,
        "status": r.status.value,
        "failed_steps": r.failed_steps,
        "remaining": r.remaining,
    }
