from dataclasses import dataclass


@dataclass(frozen=True)
class MatchFilter:
    keyword: str
    format: str

    def matches(self, url: str) -> bool:
        """Both parts must appear in the URL, ignoring case."""
        lower = url.lower()
        return self.keyword.lower() in lower and self.format.lower() in lower


@dataclass(frozen=True)
class ChannelDescriptor:
    name: str
    url: str
    filter: MatchFilter


def _channel(name, url, keyword, fmt):
    return ChannelDescriptor(name=name, url=url, filter=MatchFilter(keyword=keyword, format=fmt))


# --- Channel list (order is processing order) ---
CHANNELS = [
    _channel("Geo Tv", "https://harpalgeo.tv/live/", "harPalGeo", "chunks.m3u8"),
    _channel("Sindh TV", "https://tamashaweb.com/sindh-tv-live", "sindhTV-abr", "playlist.m3u8"),
    _channel("Hum TV", "https://www.tamashaweb.com/hum-tv-live", "humTV", "chunks.m3u8"),
    _channel("Masala TV", "https://tamashaweb.com/hum-masala-live", "hummasala", "chunks.m3u8"),
    _channel("TV ONE", "https://tamashaweb.com/tv-one-live", "TVOne", "chunks.m3u8"),
    _channel("Sindh TV News", "https://tamashaweb.com/sindh-tv-news-live", "SindhNews", "chunks.m3u8"),
    _channel("KTN", "https://tamashaweb.com/ktn-entertainment-live", "ktnEntertainment", "chunks.m3u8"),
    _channel("KTN News", "https://tamashaweb.com/ktn-news-live", "ktnNews", "chunks.m3u8"),
    _channel("Mehran TV", "https://tamashaweb.com/mehran-tv-live", "MehranTV", "chunks.m3u8"),
    _channel("ARY Digital", "https://www.tamashaweb.com/ary-digital-live", "ARYdigital", "chunks.m3u8"),
    _channel("Dunya News", "https://dunyanews.tv/livehd/", "dunyalivehd", ".m3u8"),
    _channel("Time News", "https://tamashaweb.com/time-news-live", "TimeNews", "chunks.m3u8"),
    _channel("Samaa TV", "https://tamashaweb.com/samaa-tv-live", "samaaTV", "chunks.m3u8"),
    _channel("Makkah Tv", "https://tamashaweb.com/saudi-quran-makkah-tv-hd-live", "Saudimakkah(nw)", "chunks.m3u8"),
    _channel("Ary QTV", "https://live.aryqtv.tv/", "ARYQTVH", ".m3u8"),
    _channel("Geo News", "https://www.tamashaweb.com/geo-news-live", "geoNews", "chunks.m3u8"),
]


def find_channel(name):
    for channel in CHANNELS:
        if channel.name == name:
            return channel
    return None


def select_channels(names):
    """Return the registry entries named in `names`, keeping registry order.

    An empty selection means every channel. Unknown names are returned
    separately so the caller can report them.
    """
    if not names:
        return list(CHANNELS), []
    wanted = set(names)
    selected = [c for c in CHANNELS if c.name in wanted]
    unknown = [n for n in names if find_channel(n) is None]
    return selected, unknown
