"""Run the hub-reconcile command line tool."""

from hub_reconcile.tool.hub_reconcile import main

main()
