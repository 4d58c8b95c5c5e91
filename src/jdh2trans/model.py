"""In-memory API model: packages, constants, classes, methods and enums.

Enums are owned by the registry in ``ApiModel.enums``. Classes, constants,
parameters, return values and fields refer to an enum by its
fully-qualified name, so a rename has exactly one mutation path
(``ApiModel.rename_enum``) that refreshes every index.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterator, Literal

from jdh2trans.config import InferenceConfig
from jdh2trans.naming import substitute_integer
from jdh2trans.order_contract import sort_once

ClassKind = Literal["class", "interface"]
MethodKind = Literal["constructor", "method"]

CONSTRUCTOR_NAME = "constructor"
INT_TYPES = frozenset({"int", "Integer", "java.lang.Integer"})


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    site: str
    message: str


@dataclass
class Const:
    fullname: str
    name: str
    class_name: str
    package: str
    type: str
    value: int | str
    claimed_by: str | None = None
    synthesized: bool = False

    @property
    def is_int(self) -> bool:
        return self.type in INT_TYPES and isinstance(self.value, int)


@dataclass
class EnumMember:
    const: str
    name: str


@dataclass
class InferredEnum:
    class_name: str
    package: str
    name: str
    # Empty when the name came from a hint rather than a shared prefix.
    prefix: tuple[str, ...] = ()
    members: dict[int, EnumMember] = field(default_factory=dict)

    @property
    def fullname(self) -> str:
        return f"{self.class_name}.{self.name}"

    def member_pairs(self) -> list[tuple[int, str]]:
        return [
            (value, self.members[value].name)
            for value in sort_once(self.members, source="InferredEnum.member_pairs")
        ]


@dataclass
class Field:
    name: str
    type: str
    class_name: str
    modifiers: tuple[str, ...] = ()
    # Set when the field is itself an enum value constant.
    const: str | None = None
    raw_type: str | None = None
    enum: str | None = None


@dataclass
class Parameter:
    name: str
    position: int
    type: str
    raw_type: str | None = None
    enum: str | None = None


@dataclass
class Method:
    class_name: str
    name: str
    kind: MethodKind
    modifiers: tuple[str, ...] = ()
    params: list[Parameter] = field(default_factory=list)
    return_type: str = "void"
    raw_return_type: str | None = None
    return_enum: str | None = None
    signature: str = ""

    def __post_init__(self) -> None:
        if not self.signature:
            self.signature = self.compute_signature()

    @property
    def bare_name(self) -> str:
        return CONSTRUCTOR_NAME if self.kind == "constructor" else self.name

    def compute_signature(self) -> str:
        types = ",".join(param.type for param in self.params)
        return f"{self.class_name}.{self.bare_name}({types})"

    def parameter(self, position: int) -> Parameter | None:
        for param in self.params:
            if param.position == position:
                return param
        return None


@dataclass
class ClassDecl:
    fullname: str
    package: str
    kind: ClassKind = "class"
    fields: dict[str, Field] = field(default_factory=dict)
    constructors: dict[str, Method] = field(default_factory=dict)
    methods: dict[str, Method] = field(default_factory=dict)
    enums: set[str] = field(default_factory=set)
    name_histogram: Counter[str] = field(default_factory=Counter)

    @property
    def name(self) -> str:
        return self.fullname[len(self.package) + 1:] if self.package else self.fullname

    def collection_for(self, method: Method) -> dict[str, Method]:
        return self.constructors if method.kind == "constructor" else self.methods

    def all_methods(self) -> list[Method]:
        merged = {**self.constructors, **self.methods}
        return [merged[sig] for sig in sort_once(merged, source="ClassDecl.all_methods")]


@dataclass
class Package:
    name: str
    consts: dict[str, Const] = field(default_factory=dict)
    classes: dict[str, ClassDecl] = field(default_factory=dict)


@dataclass
class ApiModel:
    config: InferenceConfig = field(default_factory=InferenceConfig)
    packages: dict[str, Package] = field(default_factory=dict)
    consts: dict[str, Const] = field(default_factory=dict)
    classes: dict[str, ClassDecl] = field(default_factory=dict)
    methods: dict[str, Method] = field(default_factory=dict)
    enums: dict[str, InferredEnum] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    _by_short_name: dict[str, list[str]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def warn(self, kind: str, site: str, message: str) -> None:
        self.diagnostics.append(Diagnostic(kind=kind, site=site, message=message))

    # -- registration -------------------------------------------------

    def add_package(self, name: str) -> Package:
        package = self.packages.get(name)
        if package is None:
            package = Package(name=name)
            self.packages[name] = package
        return package

    def add_class(self, decl: ClassDecl) -> ClassDecl:
        existing = self.classes.get(decl.fullname)
        if existing is not None:
            return existing
        self.classes[decl.fullname] = decl
        self.add_package(decl.package).classes[decl.fullname] = decl
        return decl

    def add_const(self, const: Const) -> Const:
        existing = self.consts.get(const.fullname)
        if existing is not None:
            return existing
        self.consts[const.fullname] = const
        self.add_package(const.package).consts[const.fullname] = const
        self._by_short_name.setdefault(const.name, []).append(const.fullname)
        return const

    def add_method(self, method: Method) -> Method:
        decl = self.classes[method.class_name]
        if method.signature in self.methods:
            self.warn(
                "signature_collision",
                method.signature,
                "duplicate method prototype ignored",
            )
            return self.methods[method.signature]
        self.methods[method.signature] = method
        decl.collection_for(method)[method.signature] = method
        decl.name_histogram[method.bare_name] += 1
        return method

    # -- lookups ------------------------------------------------------

    def sorted_consts(self, consts: dict[str, Const] | None = None) -> list[Const]:
        table = self.consts if consts is None else consts
        return [
            table[name]
            for name in sort_once(table, source="ApiModel.sorted_consts")
        ]

    def int_consts(self) -> Iterator[Const]:
        for const in self.sorted_consts():
            if const.is_int:
                yield const

    def consts_with_prefix(self, prefix: str) -> list[Const]:
        return [const for const in self.int_consts() if const.fullname.startswith(prefix)]

    def consts_named(self, name: str) -> list[Const]:
        """Integer constants whose short name is ``name``, in any class."""
        return [
            self.consts[fullname]
            for fullname in sort_once(
                self._by_short_name.get(name, ()),
                source="ApiModel.consts_named",
            )
            if self.consts[fullname].is_int
        ]

    def consts_in_class(self, class_name: str) -> list[Const]:
        return [const for const in self.int_consts() if const.class_name == class_name]

    def enum_for(self, fullname: str | None) -> InferredEnum | None:
        if fullname is None:
            return None
        return self.enums.get(fullname)

    def package_of_class(self, class_name: str) -> str:
        decl = self.classes.get(class_name)
        if decl is not None:
            return decl.package
        head, _, _ = class_name.rpartition(".")
        return head

    # -- mutation paths -----------------------------------------------

    def register_enum(self, enum: InferredEnum) -> InferredEnum:
        self.enums[enum.fullname] = enum
        decl = self.classes.get(enum.class_name)
        if decl is not None:
            decl.enums.add(enum.fullname)
        return enum

    def rename_enum(
        self,
        enum: InferredEnum,
        name: str,
        prefix: tuple[str, ...],
    ) -> None:
        """Change an enum's identity and refresh every place that names it."""
        old = enum.fullname
        enum.name = name
        enum.prefix = prefix
        new = enum.fullname
        if old == new:
            return
        self.enums.pop(old, None)
        self.enums[new] = enum
        decl = self.classes.get(enum.class_name)
        if decl is not None:
            decl.enums.discard(old)
            decl.enums.add(new)
        for const in self.consts.values():
            if const.claimed_by == old:
                const.claimed_by = new
        for class_decl in self.classes.values():
            for fld in class_decl.fields.values():
                if fld.enum == old:
                    self.retype_field(fld, enum)
        for method in list(self.methods.values()):
            positions = [param.position for param in method.params if param.enum == old]
            if method.return_enum == old:
                positions.append(0)
            if positions:
                self.retype_method(method, {position: enum for position in positions})

    def retype_field(self, fld: Field, enum: InferredEnum) -> None:
        base = fld.raw_type if fld.raw_type is not None else fld.type
        fld.raw_type = base
        fld.type = substitute_integer(base, enum.fullname)
        fld.enum = enum.fullname

    def retype_method(
        self,
        method: Method,
        changes: dict[int, InferredEnum],
    ) -> bool:
        """Replace parameter (position >= 1) or return (0) types by enums.

        The new signature is computed before anything is touched; on a
        collision with another method nothing changes and ``False`` is
        returned, so no index ever holds a stale key.
        """
        planned: dict[int, tuple[str, str]] = {}
        for position, enum in changes.items():
            if position == 0:
                base = method.raw_return_type or method.return_type
            else:
                param = method.parameter(position)
                if param is None:
                    return False
                base = param.raw_type or param.type
            planned[position] = (base, substitute_integer(base, enum.fullname))

        types = [
            planned[param.position][1] if param.position in planned else param.type
            for param in method.params
        ]
        new_signature = f"{method.class_name}.{method.bare_name}({','.join(types)})"
        clash = self.methods.get(new_signature)
        if clash is not None and clash is not method:
            self.warn(
                "signature_collision",
                method.signature,
                f"retyping would collide with {new_signature}; left unchanged",
            )
            return False

        decl = self.classes[method.class_name]
        collection = decl.collection_for(method)
        old_signature = method.signature
        for position, (base, resolved) in planned.items():
            enum = changes[position]
            if position == 0:
                method.raw_return_type = base
                method.return_type = resolved
                method.return_enum = enum.fullname
            else:
                param = method.parameter(position)
                assert param is not None
                param.raw_type = base
                param.type = resolved
                param.enum = enum.fullname
        method.signature = new_signature
        if old_signature != new_signature:
            self.methods.pop(old_signature, None)
            collection.pop(old_signature, None)
        self.methods[new_signature] = method
        collection[new_signature] = method
        return True

    def claim(self, const: Const, enum: InferredEnum) -> None:
        """Record ``enum`` as the owner of ``const``.

        Taking a constant away from a different enum is an ownership
        transfer and is reported.
        """
        previous = const.claimed_by
        if previous is not None and previous != enum.fullname:
            self.warn(
                "claim_transfer",
                const.fullname,
                f"constant claimed by {previous} is now claimed by {enum.fullname}",
            )
        const.claimed_by = enum.fullname
