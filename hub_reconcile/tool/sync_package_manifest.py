"""Hub-reconcile sync-package-manifest action."""

from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
import logging
from typing import cast

import yaml

from hub_reconcile.package_manifest_controller import (
    PackageManifestController,
    PackageManifestControllerConfig,
)
from hub_reconcile.resource import REDHAT_OPERATORS
from hub_reconcile.store import InMemoryPackageManifestStore

from .connection import add_connection_flags, object_client

_LOGGER = logging.getLogger(__name__)


class SyncPackageManifestAction:
    """Read the default channel of a PackageManifest."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "sync-package-manifest",
                aliases=["pm"],
                help="Print the default channel and current CSV of a PackageManifest",
                description=(
                    "Reconcile a PackageManifest once and print the facts the hub "
                    "would publish"
                ),
            ),
        )
        args.add_argument(
            "key",
            help="The PackageManifest as namespace/name",
        )
        args.add_argument(
            "--catalog-source",
            default=REDHAT_OPERATORS,
            help="Only manifests from this catalog source are reported",
        )
        add_connection_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        key: str,
        catalog_source: str,
        kubeconfig: str | None,
        context: str | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = InMemoryPackageManifestStore()
        config = PackageManifestControllerConfig(catalog_source=catalog_source)
        async with object_client(kubeconfig, context) as client:
            controller = PackageManifestController(client, store, config)
            await controller.sync(key)
        if (facts := store.get()) is None:
            _LOGGER.info("PackageManifest %s is not from %s", key, catalog_source)
            print(f"No facts published for {key}")
            return
        print(yaml.dump(facts.to_dict(), sort_keys=False, explicit_start=True), end="")
