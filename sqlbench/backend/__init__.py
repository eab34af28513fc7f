"""Query-execution backend served over the workbench command channel."""
