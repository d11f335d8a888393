import argparse
import logging
import sys

from ecsimages.aws_sessions import AWSSessions
from ecsimages.config_loader import ConfigLoader
from ecsimages.exceptions import ImageInventoryError
from ecsimages.pipeline import ImageInventory
from ecsimages.query_client import ECSQueryClient
from ecsimages.report import format_failures, format_report


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="List the container images running in an ECS cluster and the services using them."
    )
    parser.add_argument("--cluster", help="ECS cluster name (required)")
    parser.add_argument("--region", help="AWS region (default: us-east-1)")
    parser.add_argument("--profile", help="AWS profile name")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument(
        "--max-workers", type=int, help="Concurrent requests per stage (default: 5)"
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Do not show progress bars"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ConfigLoader(args.config).load_config(
            {
                "cluster": args.cluster,
                "region": args.region,
                "profile": args.profile,
                "max_workers": args.max_workers,
            }
        )
        session = AWSSessions().get_session(
            profile_name=config["profile"], region_name=config["region"]
        )
        client = ECSQueryClient(AWSSessions.ecs_client(session, config))
        inventory = ImageInventory(
            client,
            config["cluster"],
            max_workers=config["max_workers"],
            batch_size=config["batch_size"],
            show_progress=not args.no_progress,
        )
        image_services = inventory.run()
    except ImageInventoryError as e:
        print(e, file=sys.stderr)
        return 1

    if image_services is None:
        return 0

    print(format_report(image_services))
    warning = format_failures(inventory.failures)
    if warning:
        print(warning, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
