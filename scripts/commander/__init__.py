"""
Linode Commander - terminal dashboard for Linode instances.

Architecture:
- providers.py / linode_provider.py: Data access layer (protocol + implementation)
- views/: View contract, the instance list and detail views, visual tree widgets
- runner.py: Session loop that drives one active view
- controller.py: Application state machine, one view at a time
- refresher.py / render.py / scope.py: Background refresh, redraw coalescing,
  per-view lifetimes
- app.py: Textual host and renderer

Extensibility points:
1. New views: Subclass views.base.View and return them from handle_event
2. New data sources: Implement the ResourceProvider protocol
"""

__version__ = "0.1.0"
