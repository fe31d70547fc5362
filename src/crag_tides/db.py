"""Lazy Supabase client (service role)."""
from __future__ import annotations

import logging

log = logging.getLogger(__name__)

_supabase_client = None
_supabase_checked = False


def get_supabase():
    """Lazy singleton.  Returns ``supabase.Client`` or ``None`` if not configured."""
    global _supabase_client, _supabase_checked
    if _supabase_checked:
        return _supabase_client
    _supabase_checked = True
    try:
        from crag_tides.config import settings

        if not settings.supabase_url or not settings.supabase_service_key:
            return None
        from supabase import create_client

        _supabase_client = create_client(settings.supabase_url, settings.supabase_service_key)
        log.info("Supabase client created: %s", settings.supabase_url)
    except Exception as exc:
        log.warning("Supabase unavailable (%s), configuration store disabled", exc)
        _supabase_client = None
    return _supabase_client
