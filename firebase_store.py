import asyncio
import logging
from datetime import datetime, timezone

import firebase_admin
from firebase_admin import credentials, db

log = logging.getLogger("store")


def connect(credential_path, database_url, collection="channels"):
    """Initialise the Firebase app once and return a handle on the channel collection.

    Calling it again in the same process reuses the existing default app.
    """
    try:
        app = firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate(credential_path)
        app = firebase_admin.initialize_app(cred, {"databaseURL": database_url})
    log.info(f"🔥 Firebase ready ({database_url}, /{collection})")
    return ChannelStore(db.reference(collection, app=app))


class ChannelStore:
    """Updates existing channel records, looked up by their `name` field.

    `ref` is a Realtime Database reference, or anything offering `get()` and
    `child(key).update(fields)`.
    """

    def __init__(self, ref):
        self.ref = ref

    def find_key(self, channels, name):
        # integer-keyed collections come back from the SDK as a list
        items = channels.items() if isinstance(channels, dict) else enumerate(channels or [])
        for key, record in items:
            if isinstance(record, dict) and record.get("name") == name:
                return key
        return None

    def _update(self, name, url, status):
        channels = self.ref.get()
        if not channels:
            log.warning("⚠️ No channels found in Firebase.")
            return False

        key = self.find_key(channels, name)
        if key is None:
            log.warning(f"⚠️ Channel {name} not found in Firebase.")
            return False

        self.ref.child(str(key)).update({
            "url": url,
            "status": status or "active",
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
        })
        log.info(f"✅ Updated Firebase: {name} ({status or 'active'})")
        return True

    async def update_channel_url(self, name, url, status):
        try:
            return await asyncio.to_thread(self._update, name, url, status)
        except Exception as e:
            log.error(f"❌ Firebase update error for {name}: {e}")
            return False

    async def save(self, result):
        return await self.update_channel_url(result.channel_name, result.stream_url, result.status)
