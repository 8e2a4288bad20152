from typing import Any, Optional
from aws_cdk import (
    Stack,
    CfnOutput,
    Duration,
    RemovalPolicy,
    aws_s3 as s3,
    aws_s3_deployment as s3deploy,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_route53 as route53,
    aws_route53_targets as targets,
)
from constructs import Construct

from config import DeployConfig
from routing.cache_tiers import CACHE_CONTROL, CacheTier, asset_path_patterns, document_tier
from routing.domains import DomainPlan, alias_records
from routing.edge_function import render_function_code
from routing.rewrite import RewriteOptions

_DOCUMENT_CACHE_POLICIES = {
    CacheTier.DISABLED: cloudfront.CachePolicy.CACHING_DISABLED,
    CacheTier.OPTIMIZED: cloudfront.CachePolicy.CACHING_OPTIMIZED,
}


class StaticSiteStack(Stack):
    """
    Deploys the static site infrastructure:
    1. Private S3 bucket reachable only through CloudFront (OAC or legacy OAI).
    2. CloudFront Distribution with the URL rewrite function on every behavior.
    3. Asset upload with per-tier Cache-Control and a full invalidation.
    4. Route53 alias records for every custom domain name.
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: DeployConfig,
        plan: DomainPlan,
        certificate: Optional[Any] = None,
        **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. SITE BUCKET
        # =================================================================
        self.site_bucket = s3.Bucket(self, "SiteBucket",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True
        )

        if config.access_control == "oai":
            origin_access_identity = cloudfront.OriginAccessIdentity(self, "OriginAccessIdentity")
            site_origin = origins.S3BucketOrigin.with_origin_access_identity(
                self.site_bucket,
                origin_access_identity=origin_access_identity
            )
        else:
            site_origin = origins.S3BucketOrigin.with_origin_access_control(self.site_bucket)

        # =================================================================
        # 2. URL REWRITE FUNCTION (Viewer Request)
        # =================================================================
        rewrite_options = RewriteOptions.from_plan(plan, is_spa=config.is_spa)
        self.rewrite_function = cloudfront.Function(self, "UrlRewriteFunction",
            runtime=cloudfront.FunctionRuntime.JS_2_0,
            code=cloudfront.FunctionCode.from_inline(render_function_code(rewrite_options))
        )
        # Attached everywhere so apex visitors are redirected whatever they ask for
        function_associations = [
            cloudfront.FunctionAssociation(
                function=self.rewrite_function,
                event_type=cloudfront.FunctionEventType.VIEWER_REQUEST
            )
        ]

        # =================================================================
        # 3. CLOUDFRONT DISTRIBUTION
        # =================================================================
        html_tier = document_tier(config.is_spa)
        immutable_policy = cloudfront.CachePolicy(self, "ImmutableAssetsPolicy",
            comment="Fingerprinted static assets",
            default_ttl=Duration.days(365),
            min_ttl=Duration.days(1),
            max_ttl=Duration.days(365),
            enable_accept_encoding_gzip=True,
            enable_accept_encoding_brotli=True
        )

        asset_patterns = asset_path_patterns()
        asset_behaviors = {
            pattern: cloudfront.BehaviorOptions(
                origin=site_origin,
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                cache_policy=immutable_policy,
                function_associations=function_associations,
                compress=True
            )
            for pattern in asset_patterns
        }

        self.distribution = cloudfront.Distribution(self, "Distribution",
            default_root_object="index.html",
            price_class=cloudfront.PriceClass.PRICE_CLASS_100,
            certificate=certificate,
            domain_names=list(plan.aliases) or None,

            # Documents: cache tier depends on SPA mode
            default_behavior=cloudfront.BehaviorOptions(
                origin=site_origin,
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                cache_policy=_DOCUMENT_CACHE_POLICIES[html_tier],
                function_associations=function_associations,
                compress=True
            ),
            additional_behaviors=asset_behaviors
        )

        # =================================================================
        # 4. ASSET DEPLOYMENT
        # =================================================================
        source = s3deploy.Source.asset(config.dist_path)

        assets_deployment = s3deploy.BucketDeployment(self, "DeployAssets",
            sources=[source],
            destination_bucket=self.site_bucket,
            exclude=["*"],
            include=asset_patterns,
            cache_control=[s3deploy.CacheControl.from_string(CACHE_CONTROL[CacheTier.IMMUTABLE])]
        )

        documents_deployment = s3deploy.BucketDeployment(self, "DeployDocuments",
            sources=[source],
            destination_bucket=self.site_bucket,
            exclude=asset_patterns,
            cache_control=[s3deploy.CacheControl.from_string(CACHE_CONTROL[html_tier])],
            distribution=self.distribution,
            distribution_paths=["/*"]
        )
        # New documents must never reference assets that are not uploaded yet
        documents_deployment.node.add_dependency(assets_deployment)

        # =================================================================
        # 5. DNS MANAGEMENT (Route53)
        # =================================================================
        records = alias_records(plan)
        if records:
            hosted_zone = route53.HostedZone.from_lookup(self, "HostedZone", domain_name=plan.zone)
            target = route53.RecordTarget.from_alias(targets.CloudFrontTarget(self.distribution))

            for record in records:
                route53.ARecord(self, f"AliasRecord-{record.record_name}",
                    zone=hosted_zone,
                    record_name=record.record_name,
                    target=target
                )
                route53.AaaaRecord(self, f"AliasRecordIPv6-{record.record_name}",
                    zone=hosted_zone,
                    record_name=record.record_name,
                    target=target
                )

        # =================================================================
        # 6. OUTPUTS
        # =================================================================
        CfnOutput(self, "BucketName", value=self.site_bucket.bucket_name)
        CfnOutput(self, "DistributionId", value=self.distribution.distribution_id)

        if plan.canonical_domain:
            CfnOutput(self, "DomainName", value=plan.canonical_domain)
            if plan.is_apex:
                CfnOutput(self, "ApexDomainName", value=plan.apex_domain)
        else:
            CfnOutput(self, "DistributionDomainName", value=self.distribution.distribution_domain_name)
