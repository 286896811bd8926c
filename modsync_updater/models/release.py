"""Release metadata dataclasses built from the GitHub releases API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..timestamps import parse_timestamp

_JAR_PREFIX = "modsync-"


def _is_plain_jar(name: str) -> bool:
    return name.endswith(".jar") and "sources" not in name and "javadoc" not in name



def _flag(data: dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"Invalid {key} flag: {value!r}")
    return value

@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    size: int = 0
    download_url: str | None = None
    content_type: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> ReleaseAsset:
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Release asset without a name")
        size = data.get("size") or 0
        if not isinstance(size, int) or isinstance(size, bool):
            raise ValueError(f"Invalid size for asset {name}: {size!r}")
        return cls(
            name=name,
            size=size,
            download_url=data.get("browser_download_url"),
            content_type=data.get("content_type"),
        )


@dataclass(frozen=True)
class ReleaseInfo:
    """One published release. Never mutated after deserialization."""

    tag_name: str
    published_at: datetime | None = None
    assets: tuple[ReleaseAsset, ...] = field(default_factory=tuple)
    body: str = ""
    name: str | None = None
    prerelease: bool = False
    draft: bool = False
    html_url: str | None = None

    @classmethod
    def from_payload(cls, data: object) -> ReleaseInfo:
        """Build a release from a decoded "latest release" response.

        Unknown fields are ignored. ``tag`` is accepted as an alias of
        ``tag_name``.

        Raises:
            ValueError: If the payload is not an object, has no tag, or
                carries an unparsable timestamp, flag or asset list.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        tag = data.get("tag_name") or data.get("tag")
        if not isinstance(tag, str) or not tag.strip():
            raise ValueError("Release payload has no tag")

        raw_assets = data.get("assets") or []
        if not isinstance(raw_assets, list):
            raise ValueError("Release assets must be a list")
        assets = []
        for entry in raw_assets:
            if not isinstance(entry, dict):
                raise ValueError(f"Invalid asset entry: {entry!r}")
            assets.append(ReleaseAsset.from_payload(entry))

        body = data.get("body")
        return cls(
            tag_name=tag.strip(),
            published_at=parse_timestamp(data.get("published_at")),
            assets=tuple(assets),
            body=body if isinstance(body, str) else "",
            name=data.get("name"),
            prerelease=_flag(data, "prerelease"),
            draft=_flag(data, "draft"),
            html_url=data.get("html_url"),
        )

    @property
    def version(self) -> str:
        """Tag without a leading ``v``."""
        return self.tag_name[1:] if self.tag_name.startswith("v") else self.tag_name

    def find_main_jar(self) -> ReleaseAsset | None:
        for asset in self.assets:
            name = asset.name
            if name.startswith(_JAR_PREFIX) and "bootstrap" not in name and _is_plain_jar(name):
                return asset
        return None

    def find_bootstrap_jar(self) -> ReleaseAsset | None:
        for asset in self.assets:
            if "bootstrap" in asset.name and _is_plain_jar(asset.name):
                return asset
        return None
