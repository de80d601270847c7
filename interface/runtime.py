"""Wiring of the coordinator from user settings."""

import logging
import os
from typing import Optional

import requests

from application.sync_coordinator import SyncCoordinator
from config import SyncSettings, load_settings
from infrastructure.local_cache import JsonFileCache
from infrastructure.remote import RestClient, SupabaseRepository


def configure_logging(verbose: bool = False) -> None:
    level_name = os.getenv("BOARDSYNC_LOG_LEVEL") or ("DEBUG" if verbose else "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_coordinator(settings: Optional[SyncSettings] = None, session: Optional[requests.Session] = None) -> SyncCoordinator:
    settings = settings or load_settings()
    client = RestClient(
        settings.supabase_url,
        settings.supabase_key,
        session=session,
        timeout=settings.timeout,
        max_attempts=settings.max_attempts,
    )
    remote = SupabaseRepository(client, profile_table=settings.profile_table)
    cache = JsonFileCache(settings.cache_dir)
    return SyncCoordinator(
        remote,
        cache,
        workers=settings.workers,
        seed_on_empty=settings.seed_on_empty,
        profile_id=settings.profile_id,
        local_only=settings.local_only or not settings.remote_configured,
    )
