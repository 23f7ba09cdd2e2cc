#!/usr/bin/env python3
"""
Administer ACL permissions from the command line.

Reads ``ACL_*`` settings from the environment (or .env) and lets operators
create the permissions table, grant or revoke actions, and check or show
the permission held by a requester on a resource.
"""

import argparse
import json
import sys
from typing import Dict, Any, List, Optional

from shared.config import get_settings
from shared.errors import AccessLayerException
from shared.logging import configure_logging, set_request_id
from .app.acl import Acl
from .app.factory import create_acl
from .app.model import CascadingRequester, Requester, Resource

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DENIED = 2


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="acl-admin", description="Manage ACL permission masks.")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy database URL (ACL_DATABASE_URL)")
    parser.add_argument("--table", default=None, help="Permissions table name (ACL_PERMISSIONS_TABLE)")
    parser.add_argument("--redis-url", default=None, help="Redis URL for the shared cache (ACL_REDIS_URL)")
    parser.add_argument("--action-codec", default=None, help="Dotted path of the mask builder class (ACL_ACTION_CODEC)")
    parser.add_argument("--log-level", default=None, help="Log level (ACL_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the permissions table if missing")

    for name, help_text in (("grant", "Grant actions"), ("revoke", "Revoke actions")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("requester", help="Requester identifier")
        sub.add_argument("resource", help="Resource identifier")
        sub.add_argument("actions", nargs="+", help="Action names")

    check = subparsers.add_parser("check", help="Check a single action; exits 2 when denied")
    check.add_argument("requester", help="Requester identifier")
    check.add_argument("resource", help="Resource identifier")
    check.add_argument("action", help="Action name")
    check.add_argument(
        "--parent",
        dest="parents",
        action="append",
        default=[],
        help="Parent requester identifier to cascade to (repeatable)"
    )

    show = subparsers.add_parser("show", help="Show the stored mask for a requester and resource")
    show.add_argument("requester", help="Requester identifier")
    show.add_argument("resource", help="Resource identifier")

    return parser.parse_args(argv)


def _build_acl(args: argparse.Namespace) -> Acl:
    overrides: Dict[str, Any] = {}
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.table:
        overrides["permissions_table"] = args.table
    if args.redis_url:
        overrides["redis_url"] = args.redis_url
    if args.action_codec:
        overrides["action_codec"] = args.action_codec
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.command == "init-db":
        overrides["create_schema"] = True

    settings = get_settings(**overrides)
    configure_logging("acl-admin", settings.log_level)
    set_request_id()
    return create_acl(settings)


def _describe(acl: Acl, requester_id: str, resource_id: str) -> Dict[str, Any]:
    permission = acl.find_permission(Requester(requester_id), Resource(resource_id))
    mask = permission.get_mask() if permission is not None else 0
    summary: Dict[str, Any] = {"requester": requester_id, "resource": resource_id, "mask": mask}

    actions_for = getattr(acl.mask_builder_class(), "actions_for", None)
    if actions_for is not None:
        summary["actions"] = actions_for(mask)
    return summary


def run(args: argparse.Namespace) -> int:
    acl = _build_acl(args)

    if args.command == "init-db":
        print(json.dumps({"table": acl.store.table_name, "status": "ready"}))
        return EXIT_OK

    if args.command in ("grant", "revoke"):
        operation = acl.grant if args.command == "grant" else acl.revoke
        operation(Requester(args.requester), Resource(args.resource), args.actions)
        print(json.dumps(_describe(acl, args.requester, args.resource)))
        return EXIT_OK

    if args.command == "check":
        requester = Requester(args.requester)
        if args.parents:
            requester = CascadingRequester(args.requester)
            for parent in args.parents:
                requester.add_parent(Requester(parent))
        granted = acl.is_granted(requester, Resource(args.resource), args.action)
        print(json.dumps({
            "requester": args.requester,
            "resource": args.resource,
            "action": args.action,
            "granted": granted
        }))
        return EXIT_OK if granted else EXIT_DENIED

    print(json.dumps(_describe(acl, args.requester, args.resource)))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        return run(args)
    except KeyboardInterrupt:
        return 130
    except AccessLayerException as exc:
        print(json.dumps(exc.to_response().model_dump()), file=sys.stderr)
        return EXIT_ERROR
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[acl-admin] failed: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
