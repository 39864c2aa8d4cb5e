import argparse
import json
import sys
import time
from typing import Dict, List, Optional

import requests
from loguru import logger

from kapp.app_client import AppClient
from kapp.errors import KintoneAPIError, RevisionConflictError
from kapp.schemas import DeployStatus


def wait_for_deploy(
    client,
    apps: List[str],
    interval: float = 1.0,
    timeout: Optional[float] = None,
) -> Dict[str, DeployStatus]:
    """
    Poll deploy status until every app reaches a terminal state.

    A terminal state, once seen, is kept for the rest of the wait even if a
    later poll reports PROCESSING for the same app.

    Args:
        client: AppClient instance
        apps: App ids that were deployed together
        interval: Seconds between polls
        timeout: Give up after this many seconds (None waits forever)

    Returns:
        Final status per app id

    Raises:
        TimeoutError: If some app is still processing when the timeout expires
    """
    statuses = {str(app): DeployStatus.PROCESSING for app in apps}
    started = time.time()

    while True:
        pending = [app for app, status in statuses.items() if not status.is_terminal]
        if not pending:
            return statuses

        for entry in client.get_deploy_status(pending):
            previous = statuses.get(entry.app)
            if previous is not None and previous.is_terminal:
                continue
            if entry.status != previous:
                logger.info(f"App {entry.app}: {entry.status.value}")
            statuses[entry.app] = entry.status

        if all(status.is_terminal for status in statuses.values()):
            return statuses

        if timeout is not None and time.time() - started > timeout:
            raise TimeoutError(f"Deploy still processing after {timeout} seconds: {pending}")

        time.sleep(interval)


def dump(data):
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Read, stage and deploy kintone app schemas")
    parser.add_argument("--guest-space", help="Guest space id of the apps")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name in ("fields", "layout", "views", "process", "field-acl", "record-acl"):
        facet = subparsers.add_parser(name, help=f"Print the {name} facet of an app")
        facet.add_argument("app", help="App id")
        facet.add_argument("--preview", action="store_true", help="Read the preview configuration")

    deploy = subparsers.add_parser("deploy", help="Deploy preview settings to live")
    deploy.add_argument("apps", nargs="+", help="App ids (append :revision to check revisions)")
    deploy.add_argument("--revert", action="store_true", help="Discard preview changes instead")
    deploy.add_argument("--wait", action="store_true", help="Poll until the deploy finishes")
    deploy.add_argument("--interval", type=float, default=1.0, help="Seconds between polls")
    deploy.add_argument("--timeout", type=float, help="Maximum seconds to wait")

    status = subparsers.add_parser("deploy-status", help="Print deploy status")
    status.add_argument("apps", nargs="+", help="App ids")

    add_app = subparsers.add_parser("add-app", help="Create an app in preview")
    add_app.add_argument("name", help="App name")
    add_app.add_argument("--space", help="Space id to create the app in")

    args = parser.parse_args(argv)

    try:
        client = AppClient.from_env(guest_space_id=args.guest_space)

        readers = {
            "fields": client.get_form_fields,
            "layout": client.get_form_layout,
            "views": client.get_views,
            "process": client.get_process_management,
            "field-acl": client.get_field_acl,
            "record-acl": client.get_record_acl,
        }

        if args.command in readers:
            result = readers[args.command](app=args.app, preview=args.preview)
            dump(result.model_dump(by_alias=True, mode="json"))

        elif args.command == "deploy":
            targets = []
            for item in args.apps:
                app, _, revision = item.partition(":")
                targets.append({"app": app, "revision": revision or None})

            client.deploy_app(targets, revert=args.revert)

            if args.wait:
                app_ids = [target["app"] for target in targets]
                statuses = wait_for_deploy(client, app_ids, args.interval, args.timeout)
                dump({app: status.value for app, status in statuses.items()})
                if any(status is not DeployStatus.SUCCESS for status in statuses.values()):
                    return 1

        elif args.command == "deploy-status":
            dump([entry.model_dump(mode="json") for entry in client.get_deploy_status(args.apps)])

        elif args.command == "add-app":
            dump(client.add_app(args.name, space=args.space).model_dump(mode="json"))

    except RevisionConflictError as e:
        logger.error(f"Revision conflict for app(s) {e.apps or 'unknown'}: {e.message}")
        return 2
    except (KintoneAPIError, ValueError, TimeoutError, requests.RequestException):
        logger.exception(f"Command '{args.command}' failed")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
