"""site_graph.crawler: traversal engine (canonicalizer, limiter, registry, orchestrator)."""
