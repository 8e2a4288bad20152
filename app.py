import aws_cdk as cdk
from config import get_config
from routing.domains import certificate_spec, resolve_domains
from stacks.certificate_stack import CertificateStack
from stacks.site_stack import StaticSiteStack

app = cdk.App()
config = get_config(app)

# =================================================================
# 1. DOMAIN RESOLUTION
# =================================================================
# Fails fast on an undeterminable zone, before any stack exists.
plan = resolve_domains(config.custom_domain, config.domain_zone, config.apex_override)
cert_spec = certificate_spec(plan)

if plan.is_apex:
    print(f"🌐 Apex domain detected: serving {', '.join(plan.aliases)} (canonical {plan.canonical_domain})")
elif plan.canonical_domain:
    print(f"🌐 Serving custom domain {plan.canonical_domain} (zone {plan.zone})")
else:
    print("⏭️ No custom domain configured: using the CloudFront generated domain")

# =================================================================
# 2. CERTIFICATE STACK (Global - us-east-1)
# =================================================================
# ACM Certificates for CloudFront must be created in us-east-1.
cert_stack = None
if cert_spec:
    cert_env = cdk.Environment(account=config.account, region="us-east-1")
    cert_stack = CertificateStack(
        app, f"{config.stack_name}-Certificate",
        spec=cert_spec,
        env=cert_env,
        cross_region_references=True
    )

# =================================================================
# 3. SITE STACK (Primary Region)
# =================================================================
main_env = cdk.Environment(account=config.account, region=config.region)
site_stack = StaticSiteStack(
    app, config.stack_name,
    config=config,
    plan=plan,
    certificate=cert_stack.certificate if cert_stack else None,
    env=main_env,
    cross_region_references=cert_stack is not None
)

if cert_stack:
    site_stack.add_dependency(cert_stack)

app.synth()
