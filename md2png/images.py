from __future__ import annotations

import io
from pathlib import Path

import httpx
from PIL import Image, UnidentifiedImageError

from .config import REMOTE_TIMEOUT_S
from .logging_utils import get_logger

log = get_logger(__name__)

_USER_AGENT = "md2png/0.1"


class ImageResolveError(RuntimeError):
    pass


class UnsupportedSchemeError(ImageResolveError):
    pass


def split_scheme(destination: str) -> tuple[str, str]:
    if "://" not in destination:
        return "", destination
    scheme, rest = destination.split("://", 1)
    return scheme.lower(), rest


def _decode(data: bytes, source: str) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageResolveError(f"Failed to decode image {source}: {e}") from e


class ImageCache:
    def __init__(self) -> None:
        self._images: dict[str, Image.Image] = {}

    def get(self, key: str) -> Image.Image | None:
        return self._images.get(key)

    def put(self, key: str, image: Image.Image) -> None:
        self._images.setdefault(key, image)

    def __contains__(self, key: object) -> bool:
        return key in self._images

    def __len__(self) -> int:
        return len(self._images)


class LocalImageLoader:
    def __init__(self, base_dir: Path, *, confined: bool = False) -> None:
        self.base_dir = base_dir
        self.confined = confined

    def cache_key(self, destination: str) -> str:
        _, path = split_scheme(destination)
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.base_dir / candidate
        resolved = candidate.resolve()
        if self.confined and not resolved.is_relative_to(self.base_dir.resolve()):
            raise ImageResolveError(f"Image path outside base directory: {destination}")
        return str(resolved)

    def load(self, key: str) -> Image.Image:
        try:
            with open(key, "rb") as f:
                return _decode(f.read(), key)
        except OSError as e:
            raise ImageResolveError(f"Failed to open image {key}: {e}") from e


class RemoteImageLoader:
    def __init__(self, *, timeout_s: float = REMOTE_TIMEOUT_S, transport: httpx.BaseTransport | None = None) -> None:
        self.timeout_s = timeout_s
        self.transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                follow_redirects=True,
                timeout=httpx.Timeout(self.timeout_s),
                headers={"user-agent": _USER_AGENT, "accept": "image/*"},
                transport=self.transport,
            )
        return self._client

    def cache_key(self, destination: str) -> str:
        return destination

    def load(self, key: str) -> Image.Image:
        try:
            resp = self._get_client().get(key)
        except httpx.HTTPError as e:
            raise ImageResolveError(f"Fetch failed: {type(e).__name__}: {e}") from e
        status = int(resp.status_code)
        if status < 200 or status >= 300:
            raise ImageResolveError(f"Fetch failed ({status}): {key}")
        return _decode(resp.content, key)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


class ImageResolver:
    """Maps image destinations to decoded RGBA images for one render.

    Only successful decodes are cached; a failing destination is attempted
    again each time it is referenced.
    """

    def __init__(
        self,
        *,
        base_dir: Path | None = None,
        timeout_s: float = REMOTE_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
        confine_local: bool = False,
        allow_remote: bool = True,
    ) -> None:
        self.cache = ImageCache()
        self.local = LocalImageLoader(Path(base_dir) if base_dir is not None else Path.cwd(), confined=confine_local)
        self.allow_remote = allow_remote
        self.remote = RemoteImageLoader(timeout_s=timeout_s, transport=transport)

    def _loader_for(self, destination: str) -> LocalImageLoader | RemoteImageLoader:
        scheme, _ = split_scheme(destination)
        if scheme in {"", "file"}:
            return self.local
        if scheme in {"http", "https"}:
            if not self.allow_remote:
                raise UnsupportedSchemeError(f"Remote images are disabled: {destination}")
            return self.remote
        raise UnsupportedSchemeError(f"Unsupported image scheme: {scheme}")

    def resolve(self, destination: str) -> Image.Image:
        dest = str(destination or "").strip()
        if not dest:
            raise ImageResolveError("Empty image destination")
        loader = self._loader_for(dest)
        key = loader.cache_key(dest)
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("Image cache hit: %s", key)
            return cached
        image = loader.load(key)
        self.cache.put(key, image)
        return image

    def close(self) -> None:
        self.remote.close()

    def __enter__(self) -> ImageResolver:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
