from aws_cdk import (
    Stack,
    aws_certificatemanager as acm,
    aws_route53 as route53
)
from constructs import Construct

from routing.domains import CertificateSpec


class CertificateStack(Stack):
    """
    Handles SSL/TLS certificate creation and DNS validation.
    Note: This stack MUST be deployed in us-east-1 for CloudFront compatibility.
    """
    def __init__(self, scope: Construct, construct_id: str, spec: CertificateSpec, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # 1. Look up the existing Hosted Zone in Route53
        hosted_zone = route53.HostedZone.from_lookup(self, "HostedZone",
            domain_name=spec.validation_zone
        )

        # 2. Request Public Certificate with DNS Validation
        # Apex routing: subject is the www name, the apex only rides along as a SAN
        self.certificate = acm.Certificate(self, "SiteCert",
            domain_name=spec.primary_domain,
            subject_alternative_names=sorted(spec.subject_alternative_names) or None,
            validation=acm.CertificateValidation.from_dns(hosted_zone)
        )
