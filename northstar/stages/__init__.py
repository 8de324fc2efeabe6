"""NorthStar stages - timelines, tradeoffs, plan and trailer.

Each stage has a model-backed generator and a deterministic fallback:
- Orchestrator: picks the model result or the fallback per stage
- Pipeline: the four stage operations plus action dispatch
"""
