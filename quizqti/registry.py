from __future__ import annotations
import functools
from importlib import import_module
import pkgutil
from types import ModuleType
from typing import Dict, List, Tuple


@functools.lru_cache(maxsize=None)
def discover_question_types() -> Tuple[ModuleType, ...]:
    """
    Auto-import all modules in quizqti.question_types and return them in
    classification order (ascending PRIORITY). A module takes part if it
    defines TYPE_NAME, PRIORITY, matches(line) and parse_body(cursor).
    """
    import quizqti.question_types as pkg
    found: List[ModuleType] = []
    for m in pkgutil.iter_modules(pkg.__path__, pkg.__name__ + "."):
        mod = import_module(m.name)
        name = getattr(mod, "TYPE_NAME", None)
        if (
            isinstance(name, str)
            and isinstance(getattr(mod, "PRIORITY", None), int)
            and callable(getattr(mod, "matches", None))
            and callable(getattr(mod, "parse_body", None))
        ):
            found.append(mod)
    found.sort(key=lambda mod: mod.PRIORITY)
    return tuple(found)


def question_type_map() -> Dict[str, ModuleType]:
    return {mod.TYPE_NAME: mod for mod in discover_question_types()}
