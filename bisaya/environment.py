from typing import Dict, Tuple

from bisaya.errors import BisayaRuntimeError
from bisaya.types import DeclaredType, Value, coerce, project


class Environment:
    """The single, flat variable store of a running program.

    Each name maps to its declared type and current value. There is no
    nesting: a variable declared inside a PUNDOK block stays visible after
    the block ends, and a name can be declared only once per program.
    """
    def __init__(self):
        self.slots: Dict[str, Tuple[DeclaredType, Value]] = {}

    def is_declared(self, name: str) -> bool:
        return name in self.slots

    def declared_type(self, name: str) -> DeclaredType:
        return self._slot(name)[0]

    def declare(self, name: str, declared: DeclaredType, value: Value) -> Value:
        if name in self.slots:
            raise BisayaRuntimeError(f"Variable '{name}' is already declared.")
        stored = self._coerce(declared, value)
        self.slots[name] = (declared, stored)
        return stored

    def assign(self, name: str, value: Value) -> Value:
        if name not in self.slots:
            raise BisayaRuntimeError(
                f"Undefined variable '{name}'. Variables must be declared with MUGNA before assignment."
            )
        declared = self.slots[name][0]
        stored = self._coerce(declared, value)
        self.slots[name] = (declared, stored)
        return stored

    def get(self, name: str) -> Value:
        declared, value = self._slot(name)
        return project(declared, value)

    def get_raw(self, name: str) -> Value:
        return self._slot(name)[1]

    def _slot(self, name: str) -> Tuple[DeclaredType, Value]:
        try:
            return self.slots[name]
        except KeyError:
            raise BisayaRuntimeError(f"Undefined variable '{name}'") from None

    @staticmethod
    def _coerce(declared: DeclaredType, value: Value) -> Value:
        try:
            return coerce(declared, value)
        except TypeError as e:
            raise BisayaRuntimeError(str(e))
