"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .endpoint import DOMAIN_SUFFIX, ROUTING_MARKER, EndpointParser
from .phone import DEFAULT_REGION
from .pipeline import RequestValidator


@dataclass(frozen=True)
class Settings:
    auth_token: str = ""
    public_origin: str = ""
    default_region: str = DEFAULT_REGION
    domain_suffix: str = DOMAIN_SUFFIX
    routing_marker: str = ROUTING_MARKER

    def __repr__(self) -> str:
        return (
            f"Settings(auth_token=<redacted>, public_origin={self.public_origin!r}, "
            f"default_region={self.default_region!r}, domain_suffix={self.domain_suffix!r}, "
            f"routing_marker={self.routing_marker!r})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            auth_token=env.get("VOICEHOOK_AUTH_TOKEN", ""),
            public_origin=env.get("VOICEHOOK_PUBLIC_ORIGIN", ""),
            default_region=env.get("VOICEHOOK_DEFAULT_REGION", DEFAULT_REGION),
            domain_suffix=env.get("VOICEHOOK_DOMAIN_SUFFIX", DOMAIN_SUFFIX),
            routing_marker=env.get("VOICEHOOK_ROUTING_MARKER", ROUTING_MARKER),
        )

    def endpoint_parser(self) -> EndpointParser:
        return EndpointParser(
            region=self.default_region,
            domain_suffix=self.domain_suffix,
            routing_marker=self.routing_marker,
        )

    def build_validator(self) -> RequestValidator:
        """Return a validator configured from these settings."""

        if not self.auth_token:
            raise ValueError("VOICEHOOK_AUTH_TOKEN is not configured")
        if not self.public_origin:
            raise ValueError("VOICEHOOK_PUBLIC_ORIGIN is not configured")
        return RequestValidator(
            auth_token=self.auth_token,
            origin=self.public_origin,
            endpoint_parser=self.endpoint_parser(),
        )
