from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple


class ConfigurationError(RuntimeError):
    """
    Raised when the deployment configuration cannot produce a valid plan.
    Always raised at synth time, before any stack is constructed.
    """


@dataclass(frozen=True)
class DomainPlan:
    """
    Domain names served by the distribution.

    When ``is_apex`` is set, ``aliases`` is ``(www_domain, apex_domain)`` with
    the www form first as the canonical name. Otherwise it holds the custom
    domain alone, or nothing when no custom domain is configured.
    """
    apex_domain: Optional[str] = None
    www_domain: Optional[str] = None
    canonical_domain: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    is_apex: bool = False
    zone: Optional[str] = None


@dataclass(frozen=True)
class CertificateSpec:
    primary_domain: str
    subject_alternative_names: FrozenSet[str]
    validation_zone: str


@dataclass(frozen=True)
class AliasRecord:
    zone: str
    record_name: str


def normalize_domain(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().rstrip(".").lower()
    return value or None


def is_apex_domain(domain: str) -> bool:
    """
    Two labels and no www prefix, e.g. 'example.com'.
    Multi-label public suffixes ('example.co.uk') are reported as non-apex.
    """
    return not domain.startswith("www.") and len(domain.split(".")) == 2


def derive_zone(domain: str, is_apex: bool) -> Optional[str]:
    """
    The apex itself, or the domain minus its leftmost label. A single label
    is never a usable hosted zone, so that case yields None.
    """
    zone = domain if is_apex else ".".join(domain.split(".")[1:])
    return zone if "." in zone else None


def resolve_domains(
    custom_domain: Optional[str],
    explicit_zone: Optional[str] = None,
    apex_override: Optional[bool] = None
) -> DomainPlan:
    """
    Derives the domain plan for a deployment.

    1. No custom domain: empty plan, the distribution keeps its generated name.
    2. Apex domain: served on both names, www is canonical.
    3. Anything else: served on the custom domain only.

    The hosted zone is ``explicit_zone`` verbatim when given, the apex itself
    for apex domains, and the custom domain minus its leftmost label
    otherwise. A derived zone with a single label ('com') is rejected.
    """
    domain = normalize_domain(custom_domain)
    if domain is None:
        return DomainPlan()

    if apex_override is None:
        is_apex = is_apex_domain(domain)
    else:
        if apex_override and domain.startswith("www."):
            raise ConfigurationError(
                f"❌ INVALID CONFIG: '{domain}' cannot be forced to apex routing, it already has a www prefix"
            )
        is_apex = apex_override

    zone = explicit_zone or derive_zone(domain, is_apex)
    if zone is None:
        raise ConfigurationError(
            f"❌ MISSING CONFIG: Cannot derive a hosted zone for '{domain}', set 'domainZone' explicitly"
        )

    if is_apex:
        www_domain = f"www.{domain}"
        return DomainPlan(
            apex_domain=domain,
            www_domain=www_domain,
            canonical_domain=www_domain,
            aliases=(www_domain, domain),
            is_apex=True,
            zone=zone
        )

    return DomainPlan(
        canonical_domain=domain,
        aliases=(domain,),
        zone=zone
    )


def certificate_spec(plan: DomainPlan) -> Optional[CertificateSpec]:
    """
    Certificate identity for the plan: the canonical name as subject and the
    remaining aliases as SANs. Validation is always DNS against the plan zone.
    """
    if not plan.canonical_domain:
        return None
    return CertificateSpec(
        primary_domain=plan.canonical_domain,
        subject_alternative_names=frozenset(a for a in plan.aliases if a != plan.canonical_domain),
        validation_zone=plan.zone
    )


def alias_records(plan: DomainPlan) -> Tuple[AliasRecord, ...]:
    # One alias per served name, all pointing at the same distribution
    return tuple(AliasRecord(zone=plan.zone, record_name=alias) for alias in plan.aliases)
