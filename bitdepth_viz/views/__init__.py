"""CLI views.

Each public module here defines a `view` whose name matches the module name;
bitdepth_viz.registry.discover() registers it as a subcommand.
"""
