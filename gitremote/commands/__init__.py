"""Click commands for the gitremote CLI."""
