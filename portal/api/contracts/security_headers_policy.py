"""
portal.api.contracts.security_headers_policy

Purpose:
    Static HTTP security headers attached to every API response.
    HSTS is only sent in production deployments.

Created:
    2026-02-15
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SecurityHeadersPolicy:
    content_type_options: str = "nosniff"
    xss_protection: str = "1; mode=block"
    frame_options: str = "DENY"
    cache_control: str = "no-store, no-cache, must-revalidate, proxy-revalidate"
    pragma: str = "no-cache"
    expires: str = "0"
    cross_domain_policies: str = "none"
    content_security_policy: str = "default-src 'none'; frame-ancestors 'none'"
    strict_transport_security: str = "max-age=31536000; includeSubDomains; preload"

    def headers(self, *, production: bool) -> dict[str, str]:
        out = {
            "X-Content-Type-Options": self.content_type_options,
            "X-XSS-Protection": self.xss_protection,
            "X-Frame-Options": self.frame_options,
            "Cache-Control": self.cache_control,
            "Pragma": self.pragma,
            "Expires": self.expires,
            "X-Permitted-Cross-Domain-Policies": self.cross_domain_policies,
            "Content-Security-Policy": self.content_security_policy,
        }
        if production:
            out["Strict-Transport-Security"] = self.strict_transport_security
        return out
