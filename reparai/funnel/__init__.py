"""Diagnostic funnel engine: session state, controller, merge and finalizer."""
