"""
Django management command to check the cache used for store payloads.

Usage:
    python manage.py check_cache
    python manage.py check_cache --store 12
"""
from django.conf import settings
from django.core.cache import cache
from django.core.management.base import BaseCommand, CommandError

from storedesk.core.model_cache import (
    cache_store_data,
    get_cached_store,
    get_store_cache_key,
    invalidate_store_cache,
)


class Command(BaseCommand):
    help = 'Check cache configuration and the store payload cache'

    def add_arguments(self, parser):
        parser.add_argument('--store', type=int, help='Show whether this store id currently has a cached payload')

    def handle(self, *args, **options):
        self.stdout.write("=" * 60)
        self.stdout.write(self.style.SUCCESS("Cache Configuration Check"))
        self.stdout.write("=" * 60)

        self.stdout.write(f"\n1. Cache Backend: {settings.CACHES['default']['BACKEND']}")
        self.stdout.write(f"2. Cache Location: {settings.CACHES['default'].get('LOCATION', 'N/A')}")

        self.stdout.write("\n3. Store Payload Cache:")
        self.stdout.write("-" * 60)

        # Negative id never collides with a real store
        probe_id = -1
        payload = {'id': probe_id, 'name': 'cache-check', 'inventory': []}
        try:
            cache_store_data(probe_id, payload, ttl=60)
            if get_cached_store(probe_id) != payload:
                raise CommandError(f"Cached payload for {get_store_cache_key(probe_id)} did not round trip")
            self.stdout.write(self.style.SUCCESS("Store payload SET/GET: OK"))

            invalidate_store_cache(probe_id)
            if get_cached_store(probe_id) is not None:
                raise CommandError("Store payload was not invalidated")
            self.stdout.write(self.style.SUCCESS("Store payload invalidation: OK"))
        finally:
            cache.delete(get_store_cache_key(probe_id))

        store_id = options.get('store')
        if store_id is not None:
            state = 'cached' if get_cached_store(store_id) else 'not cached'
            self.stdout.write(f"\nStore {store_id}: {state}")

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(self.style.SUCCESS("Cache is working"))
        self.stdout.write("=" * 60)
