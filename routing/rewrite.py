from dataclasses import dataclass
from typing import Optional, Union

from routing.domains import DomainPlan

INDEX_DOCUMENT = "index.html"


@dataclass(frozen=True)
class PassThrough:
    pass


@dataclass(frozen=True)
class RewriteUri:
    uri: str


@dataclass(frozen=True)
class RedirectPermanent:
    location: str
    status: int = 301


Action = Union[PassThrough, RewriteUri, RedirectPermanent]


@dataclass(frozen=True)
class RewriteOptions:
    """
    Constants baked into the edge function at synth time.
    """
    is_spa: bool = False
    apex_redirect: bool = False
    apex_domain: Optional[str] = None
    www_domain: Optional[str] = None

    @classmethod
    def from_plan(cls, plan: DomainPlan, is_spa: bool) -> "RewriteOptions":
        return cls(
            is_spa=is_spa,
            apex_redirect=plan.is_apex,
            apex_domain=plan.apex_domain,
            www_domain=plan.www_domain
        )


def rewrite(uri: str, host: str, options: RewriteOptions) -> Action:
    """
    Maps a viewer request to the action taken at the edge. First match wins:

    1. Apex host: permanent redirect to the www host, path untouched.
    2. URIs without a leading slash are left alone.
    3. Directory URIs ('/' or a trailing slash) get the index document appended.
    4. Extensionless URIs go to '/index.html' in SPA mode, where the client
       router owns every route, and to '<uri>/index.html' otherwise.
    5. Everything else is served as is.
    """
    if options.apex_redirect and host == options.apex_domain:
        return RedirectPermanent(f"https://{options.www_domain}{uri}")

    if not uri.startswith("/"):
        return PassThrough()

    if uri == "/":
        return RewriteUri(f"/{INDEX_DOCUMENT}")
    if uri.endswith("/"):
        return RewriteUri(f"{uri}{INDEX_DOCUMENT}")
    if "." not in uri:
        if options.is_spa:
            return RewriteUri(f"/{INDEX_DOCUMENT}")
        return RewriteUri(f"{uri}/{INDEX_DOCUMENT}")

    return PassThrough()
