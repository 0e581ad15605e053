"""Shared Pydantic models."""

from sitectl_common.models.audit_event import AuditEvent
from sitectl_common.models.site import Site, SiteEntry, SiteStatus, is_valid_site_name

__all__ = ["AuditEvent", "Site", "SiteEntry", "SiteStatus", "is_valid_site_name"]
