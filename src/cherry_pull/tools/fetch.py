"""Download pull request patches over HTTP."""

from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable, Optional

from ..errors import PatchDownloadError

__all__ = ["PatchFetcher", "Transport"]

LOGGER = logging.getLogger(__name__)

Transport = Callable[[str], bytes]


class PatchFetcher:
    """Fetch ``.patch`` payloads and store them at a deterministic path."""

    def __init__(
        self,
        *,
        url_template: str,
        patch_dir: Path,
        transport: Optional[Transport] = None,
        timeout: float = 60.0,
    ) -> None:
        self._url_template = url_template
        self._patch_dir = Path(patch_dir).expanduser()
        self._timeout = timeout
        self._transport = transport or self._http_transport

    def url_for(self, pull: str) -> str:
        return self._url_template.format(pull=pull)

    def path_for(self, pull: str) -> Path:
        return self._patch_dir / f"{pull}.patch"

    def fetch(self, pull: str) -> Path:
        """Download the patch for ``pull`` and return the saved path."""
        url = self.url_for(pull)
        target = self.path_for(pull)
        LOGGER.info("Downloading %s to %s", url, target)
        payload = self._transport(url)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as error:
            raise PatchDownloadError(f"Unable to write patch to {target}: {error}") from error
        return target

    def _http_transport(self, url: str) -> bytes:
        """Default transport; ``urlopen`` follows redirects."""
        try:
            request = urllib.request.Request(
                url,
                headers={"User-Agent": "cherry-pull/0.1"},
                method="GET",
            )
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read()
                status = getattr(response, "status", None) or 200
        except urllib.error.HTTPError as error:  # pragma: no cover - network-dependent
            raise PatchDownloadError(f"HTTP {error.code} while downloading {url}") from error
        except urllib.error.URLError as error:
            raise PatchDownloadError(f"Failed to reach {url}: {error.reason}") from error
        except TimeoutError as error:  # pragma: no cover - network-dependent
            raise PatchDownloadError(f"Timed out downloading {url}.") from error
        except (http.client.HTTPException, OSError, ValueError) as error:
            raise PatchDownloadError(f"Failed to download {url}: {error!r}") from error

        if status >= 400:
            raise PatchDownloadError(f"Unexpected HTTP status {status} for {url}")

        return raw
