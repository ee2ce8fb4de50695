"""snapshot-creator: snapshot versions and workspace-tracked dependency sync."""
