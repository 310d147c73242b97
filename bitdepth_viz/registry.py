"""View auto-discovery and registration.

Every public module in bitdepth_viz/views/ that defines a module-level `view`
(a View) becomes a CLI subcommand named after the module. The subcommand name
is the module name, so a view whose `name` disagrees with its module, or two
modules claiming the same name, is a packaging mistake and fails loudly.
"""

import importlib
import logging
import pkgutil

from bitdepth_viz.core.types import View

logger = logging.getLogger(__name__)

VIEWS_PACKAGE = 'bitdepth_viz.views'

_registry: dict[str, dict[str, View]] = {}


class RegistryError(RuntimeError):
    """A views package is laid out inconsistently."""


def _scan(package: str) -> dict[str, View]:
    pkg = importlib.import_module(package)
    found: dict[str, View] = {}
    for _importer, modname, _ispkg in sorted(pkgutil.iter_modules(pkg.__path__), key=lambda m: m[1]):
        if modname.startswith('_'):
            continue
        module = importlib.import_module(f'{package}.{modname}')
        view = getattr(module, 'view', None)
        if not isinstance(view, View):
            logger.debug('skipping %s.%s: no view defined', package, modname)
            continue
        if view.name in found:
            raise RegistryError(f'duplicate view name {view.name!r} in {package}.{modname}')
        if view.name != modname:
            raise RegistryError(f'view {view.name!r} must live in module {package}.{view.name}, not {modname}')
        found[view.name] = view
    if not found:
        raise RegistryError(f'no views found in {package}')
    return found


def discover(package: str = VIEWS_PACKAGE) -> dict[str, View]:
    """Import all view modules in `package` and return them keyed by name."""
    if package not in _registry:
        _registry[package] = _scan(package)
    return _registry[package]


def get(name: str) -> View:
    """Get a view by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown view: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_views() -> dict[str, View]:
    """Return all registered views."""
    return discover()
