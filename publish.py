"""
Content-only redeploy of the static site.

Syncs the build output into the site bucket with per-tier Cache-Control
headers and invalidates the CloudFront distribution. The bucket and the
distribution are read from the outputs of the deployed site stack.

Usage:
    python publish.py --stack-name my-site [--dist ./dist] [--spa]
"""
import argparse
import mimetypes
import time
import uuid
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

import boto3

from config import get_bool_env, get_optional_env, get_required_env
from routing.cache_tiers import CACHE_CONTROL, classify
from routing.domains import ConfigurationError


def stack_outputs(cloudformation, stack_name: str) -> Dict[str, str]:
    response = cloudformation.describe_stacks(StackName=stack_name)
    outputs = response["Stacks"][0].get("Outputs", [])
    return {output["OutputKey"]: output["OutputValue"] for output in outputs}


def iter_site_files(dist_path: str) -> Iterator[Path]:
    root = Path(dist_path)
    for path in sorted(root.rglob("*")):
        if path.is_file():
            yield path


def upload_site(s3, bucket_name: str, dist_path: str, is_spa: bool) -> int:
    """
    Uploads every file of the build output. Returns the number of objects written.
    """
    root = Path(dist_path)
    count = 0
    for path in iter_site_files(dist_path):
        key = path.relative_to(root).as_posix()
        content_type, _ = mimetypes.guess_type(path.name)
        extra_args = {
            "ContentType": content_type or "application/octet-stream",
            "CacheControl": CACHE_CONTROL[classify(key, is_spa)],
        }
        s3.upload_file(str(path), bucket_name, key, ExtraArgs=extra_args)
        count += 1
    print(f"📦 Uploaded {count} files to s3://{bucket_name}/")
    return count


def invalidate(cloudfront, distribution_id: str, paths: Sequence[str] = ("/*",)) -> str:
    response = cloudfront.create_invalidation(
        DistributionId=distribution_id,
        InvalidationBatch={
            "Paths": {"Quantity": len(paths), "Items": list(paths)},
            "CallerReference": f"publish-{int(time.time())}-{uuid.uuid4().hex[:8]}",
        },
    )
    invalidation_id = response["Invalidation"]["Id"]
    print(f"🧹 Invalidation {invalidation_id} created for {', '.join(paths)}")
    return invalidation_id


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Publish the static site build to its bucket.")
    parser.add_argument("--stack-name", help="Deployed site stack (defaults to STACK_NAME)")
    parser.add_argument("--dist", help="Build output directory (defaults to hereyaProjectRootDir/distFolder)")
    parser.add_argument("--spa", action="store_true", default=None, help="Publish documents uncached (defaults to isSpa)")
    parser.add_argument("--region", help="AWS region of the site stack")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, session=None) -> str:
    args = parse_args(argv)
    stack_name = args.stack_name or get_required_env("STACK_NAME")
    dist_path = args.dist
    if not dist_path:
        root = get_required_env("hereyaProjectRootDir")
        dist_path = str(Path(root) / (get_optional_env("distFolder") or "dist"))
    if not Path(dist_path).is_dir():
        raise ConfigurationError(f"❌ INVALID CONFIG: Build output '{dist_path}' does not exist, run the build first")
    is_spa = args.spa if args.spa is not None else get_bool_env("isSpa", False)

    session = session or boto3.session.Session(region_name=args.region)
    outputs = stack_outputs(session.client("cloudformation"), stack_name)
    missing = [key for key in ("BucketName", "DistributionId") if key not in outputs]
    if missing:
        raise ConfigurationError(f"❌ MISSING CONFIG: Stack '{stack_name}' has no output(s) {', '.join(missing)}")

    print(f"🚀 Publishing {dist_path} to stack {stack_name}")
    upload_site(session.client("s3"), outputs["BucketName"], dist_path, is_spa)
    return invalidate(session.client("cloudfront"), outputs["DistributionId"])


if __name__ == "__main__":
    main()
