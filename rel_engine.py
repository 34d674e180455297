from __future__ import annotations

import bisect
import json
import logging
import math
import os
import threading
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Dict, Any, Optional, Iterable, Iterator, Callable, Union

import rel_config

logger = logging.getLogger(__name__)


class RelAlgError(Exception):
    """Base error for relational algebra engine."""

class SchemaError(RelAlgError):
    pass

class AttributeNotFoundError(SchemaError):
    pass

class SchemaMismatchError(SchemaError):
    """Union/minus/intersect operands differ in arity or domains."""

IncompatibleRelationError = SchemaMismatchError

class TypeMismatchError(RelAlgError):
    pass

class JoinArityError(RelAlgError):
    pass

class KeyArityError(RelAlgError):
    pass

class SerializationError(RelAlgError):
    pass

class DuplicateKeyWarning(UserWarning):
    """An insert replaced the index entry of an existing primary key."""


def _assert(cond: bool, msg: str, err=RelAlgError):
    if not cond:
        raise err(msg)

def _names(attrs: Union[str, Iterable[str]]) -> List[str]:
    # "title year" and ["title", "year"] are both accepted
    if isinstance(attrs, str):
        return attrs.split()
    return list(attrs)

########################
# Domains
########################

_INT_BITS = {"INT64": 64, "INT32": 32, "INT16": 16, "INT8": 8}
_FLOAT32_MAX = 3.4028234663852886e38


class Domain(Enum):
    """Closed set of attribute domains, valued by their conventional type names."""
    INT64 = "Long"
    INT32 = "Integer"
    INT16 = "Short"
    INT8 = "Byte"
    FLOAT64 = "Double"
    FLOAT32 = "Float"
    CHAR = "Character"
    STRING = "String"

    @classmethod
    def parse(cls, spec: Union[str, "Domain"]) -> "Domain":
        """Accept a member, its name ("INT32"), its type name ("Integer") or an alias ("int")."""
        if isinstance(spec, Domain):
            return spec
        _assert(isinstance(spec, str), f"Unknown domain {spec!r}", SchemaError)
        key = spec.strip()
        if key.upper() in cls.__members__:
            return cls[key.upper()]
        for d in cls:
            if d.value.lower() == key.lower():
                return d
        alias = _DOMAIN_ALIASES.get(key.lower())
        _assert(alias is not None, f"Unknown domain {spec!r}", SchemaError)
        return alias

    @property
    def is_integer(self) -> bool:
        return self.name in _INT_BITS

    @property
    def is_float(self) -> bool:
        return self in (Domain.FLOAT64, Domain.FLOAT32)

    def accepts(self, value: Any) -> bool:
        if self.is_integer:
            if isinstance(value, bool) or not isinstance(value, int):
                return False
            bits = _INT_BITS[self.name]
            return -(1 << (bits - 1)) <= value < (1 << (bits - 1))
        if self.is_float:
            if not isinstance(value, float):
                return False
            if self is Domain.FLOAT32:
                # nan compares false, so only finite out-of-range values fail
                return math.isinf(value) or not abs(value) > _FLOAT32_MAX
            return True
        if self is Domain.CHAR:
            return isinstance(value, str) and len(value) == 1
        return isinstance(value, str)


_DOMAIN_ALIASES = {
    "int": Domain.INT32, "long": Domain.INT64, "short": Domain.INT16, "byte": Domain.INT8,
    "int64": Domain.INT64, "int32": Domain.INT32, "int16": Domain.INT16, "int8": Domain.INT8,
    "float64": Domain.FLOAT64, "float32": Domain.FLOAT32, "char": Domain.CHAR,
    "str": Domain.STRING, "text": Domain.STRING,
}

########################
# Schema
########################

@dataclass(frozen=True)
class Schema:
    """Static shape of a relation: attribute names, domains and primary key."""
    name: str
    attributes: Tuple[str, ...]
    domains: Tuple[Domain, ...]
    key: Tuple[str, ...]

    def __post_init__(self):
        attrs = tuple(_names(self.attributes))
        domains = self.domains.split() if isinstance(self.domains, str) else self.domains
        domains = tuple(Domain.parse(d) for d in domains)
        key = tuple(_names(self.key))
        object.__setattr__(self, "attributes", attrs)
        object.__setattr__(self, "domains", domains)
        object.__setattr__(self, "key", key)

        _assert(len(attrs) == len(domains),
                f"Schema {self.name}: {len(attrs)} attributes but {len(domains)} domains", SchemaError)
        dupes = sorted({a for a in attrs if attrs.count(a) > 1})
        _assert(not dupes, f"Schema {self.name}: duplicate attribute names {dupes}", SchemaError)
        _assert(len(key) > 0, f"Schema {self.name}: primary key must not be empty", SchemaError)
        for k in key:
            _assert(k in attrs, f"Schema {self.name}: key attribute {k!r} not in {list(attrs)}",
                    AttributeNotFoundError)

    @property
    def arity(self) -> int:
        return len(self.attributes)

    def find(self, name: str) -> Optional[int]:
        for i, a in enumerate(self.attributes):
            if a == name:
                return i
        return None

    def column_of(self, name: str) -> int:
        pos = self.find(name)
        _assert(pos is not None, f"Attribute {name!r} not in schema {self.name}{list(self.attributes)}",
                AttributeNotFoundError)
        return pos

    def columns_of(self, names: Iterable[str]) -> List[int]:
        return [self.column_of(n) for n in names]

    @property
    def key_columns(self) -> List[int]:
        return self.columns_of(self.key)

    def domains_of(self, names: Iterable[str]) -> Tuple[Domain, ...]:
        return tuple(self.domains[i] for i in self.columns_of(names))

    def renamed(self, name: str) -> "Schema":
        return Schema(name, self.attributes, self.domains, self.key)

########################
# Composite keys and indexes
########################

@dataclass(frozen=True, order=True)
class CompositeKey:
    """Ordered value sequence taken from a tuple's key attributes."""
    values: Tuple[Any, ...]

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    @classmethod
    def of(cls, *values: Any) -> "CompositeKey":
        return cls(values)

    @classmethod
    def extract(cls, tup: Tuple[Any, ...], cols: List[int]) -> "CompositeKey":
        return cls(tuple(tup[i] for i in cols))

    def __len__(self):
        return len(self.values)

    def __repr__(self):
        return f"CompositeKey{self.values!r}"


class KeyIndex:
    """Mapping from CompositeKey to tuple; later puts replace earlier ones."""
    kind = "abstract"
    enabled = True

    def get(self, key: CompositeKey) -> Optional[Tuple[Any, ...]]:
        raise NotImplementedError()

    def put(self, key: CompositeKey, tup: Tuple[Any, ...]) -> Optional[Tuple[Any, ...]]:
        """Store tup under key, returning the tuple it replaced (if any)."""
        raise NotImplementedError()

    def __iter__(self) -> Iterator[CompositeKey]:
        raise NotImplementedError()

    def __len__(self):
        raise NotImplementedError()

    def __contains__(self, key: CompositeKey) -> bool:
        return self.get(key) is not None

    def items(self) -> Iterator[Tuple[CompositeKey, Tuple[Any, ...]]]:
        for k in self:
            yield k, self.get(k)


class NullIndex(KeyIndex):
    """No index: lookups fall back to scanning the rows."""
    kind = "none"
    enabled = False

    def get(self, key):
        return None

    def put(self, key, tup):
        return None

    def __iter__(self):
        return iter(())

    def __len__(self):
        return 0


class TreeIndex(KeyIndex):
    """Ordered map: a sorted key list alongside a dict of entries."""
    kind = "tree"

    def __init__(self):
        self._keys: List[CompositeKey] = []
        self._entries: Dict[CompositeKey, Tuple[Any, ...]] = {}

    def get(self, key):
        return self._entries.get(key)

    def put(self, key, tup):
        prev = self._entries.get(key)
        if prev is None:
            bisect.insort(self._keys, key)
        self._entries[key] = tup
        return prev

    def __iter__(self):
        return iter(list(self._keys))

    def __len__(self):
        return len(self._entries)

    def first(self) -> Optional[CompositeKey]:
        return self._keys[0] if self._keys else None

    def last(self) -> Optional[CompositeKey]:
        return self._keys[-1] if self._keys else None

    def range(self, low: Optional[CompositeKey] = None, high: Optional[CompositeKey] = None):
        """Yield (key, tuple) for low <= key <= high in key order."""
        start = 0 if low is None else bisect.bisect_left(self._keys, low)
        stop = len(self._keys) if high is None else bisect.bisect_right(self._keys, high)
        for k in self._keys[start:stop]:
            yield k, self._entries[k]


class HashIndex(KeyIndex):
    """Hash map; ordered iteration sorts the keys on demand."""
    kind = "hash"

    def __init__(self):
        self._entries: Dict[CompositeKey, Tuple[Any, ...]] = {}

    def get(self, key):
        return self._entries.get(key)

    def put(self, key, tup):
        prev = self._entries.get(key)
        self._entries[key] = tup
        return prev

    def __iter__(self):
        return iter(sorted(self._entries))

    def __len__(self):
        return len(self._entries)


_INDEX_KINDS = {cls.kind: cls for cls in (NullIndex, TreeIndex, HashIndex)}

def make_index(kind: Optional[str] = None) -> KeyIndex:
    kind = kind or rel_config.DEFAULT_INDEX_KIND
    if kind not in _INDEX_KINDS:
        raise ValueError(f"Unknown index kind {kind!r}; expected one of {sorted(_INDEX_KINDS)}")
    return _INDEX_KINDS[kind]()

########################
# Naming and type checking
########################

class NameGenerator:
    """Names derived relations base0, base1, ... from its own counter."""

    def __init__(self, start: int = 0):
        self._count = start
        self._lock = threading.Lock()

    def __call__(self, base: str) -> str:
        with self._lock:
            n = self._count
            self._count += 1
        return f"{base}{n}"


def check_tuple(tup: Tuple[Any, ...], schema: Schema) -> None:
    _assert(len(tup) == schema.arity,
            f"Tuple has {len(tup)} values but {schema.name} has {schema.arity} attributes",
            TypeMismatchError)
    for attr, dom, value in zip(schema.attributes, schema.domains, tup):
        _assert(dom.accepts(value),
                f"{schema.name}.{attr}: {value!r} ({type(value).__name__}) is not a {dom.value}",
                TypeMismatchError)

def type_check(tup: Tuple[Any, ...], schema: Schema) -> bool:
    try:
        check_tuple(tup, schema)
    except TypeMismatchError:
        return False
    return True

def compatible(r1: "Relation", r2: "Relation") -> bool:
    return r1.domains == r2.domains

def _assert_compatible(op: str, r1: "Relation", r2: "Relation"):
    _assert(r1.schema.arity == r2.schema.arity,
            f"{op}: {r1.name} has arity {r1.schema.arity}, {r2.name} has arity {r2.schema.arity}",
            SchemaMismatchError)
    for j, (d1, d2) in enumerate(zip(r1.domains, r2.domains)):
        _assert(d1 is d2, f"{op}: {r1.name} and {r2.name} disagree on domain {j} ({d1.value} vs {d2.value})",
                SchemaMismatchError)

########################
# Relation
########################

class Relation:
    """A named schema with its tuples and primary-key index."""

    def __init__(self, schema: Schema, rows: Optional[Iterable[Tuple[Any, ...]]] = None,
                 index: Optional[str] = None, namer: Optional[NameGenerator] = None,
                 on_duplicate: Optional[str] = None):
        self.schema = schema
        self.rows: List[Tuple[Any, ...]] = [tuple(r) for r in rows] if rows is not None else []
        self.index = make_index(index)
        self.namer = namer or NameGenerator()
        self.on_duplicate = on_duplicate or rel_config.DUPLICATE_KEY_POLICY
        _assert(self.on_duplicate in ("overwrite", "reject"),
                f"Unknown duplicate key policy {self.on_duplicate!r}", ValueError)
        self._lock = threading.RLock()
        self._key_cols = schema.key_columns
        for row in self.rows:
            self.index.put(CompositeKey.extract(row, self._key_cols), row)

    @classmethod
    def create(cls, name: str, attributes, domains, key, **kwargs) -> "Relation":
        """movie = Relation.create("movie", "title year", "String Integer", "title year")"""
        return cls(Schema(name, attributes, domains, key), **kwargs)

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def attributes(self) -> Tuple[str, ...]:
        return self.schema.attributes

    @property
    def domains(self) -> Tuple[Domain, ...]:
        return self.schema.domains

    @property
    def key(self) -> Tuple[str, ...]:
        return self.schema.key

    def __len__(self):
        return len(self.rows)

    def __iter__(self):
        return iter(self.snapshot())

    def __repr__(self):
        return f"Relation({self.name!r}, {list(self.attributes)}, key={list(self.key)}, rows={len(self.rows)})"

    def snapshot(self) -> List[Tuple[Any, ...]]:
        with self._lock:
            return list(self.rows)

    def col(self, name: str) -> int:
        return self.schema.column_of(name)

    def key_of(self, tup: Tuple[Any, ...]) -> CompositeKey:
        return CompositeKey.extract(tup, self._key_cols)

    def derive(self, schema: Schema, rows: Iterable[Tuple[Any, ...]]) -> "Relation":
        """Materialize an operator result sharing this relation's index kind and namer."""
        return Relation(schema, rows, index=self.index.kind, namer=self.namer,
                        on_duplicate=self.on_duplicate)

    def insert(self, *values: Any) -> bool:
        """Insert one tuple; movie.insert("Star_Wars", 1977, 12345) or movie.insert(tup)."""
        tup = tuple(values[0]) if len(values) == 1 and isinstance(values[0], (tuple, list)) else tuple(values)
        logger.debug("DML> insert into %s values %r", self.name, tup)
        try:
            check_tuple(tup, self.schema)
        except TypeMismatchError as e:
            logger.warning("insert into %s rejected: %s", self.name, e)
            return False

        key = self.key_of(tup)
        with self._lock:
            # without an index only "reject" pays for the scan
            check = self.index.enabled or self.on_duplicate == "reject"
            if check and self._find_by_key(key) is not None:
                if self.on_duplicate == "reject":
                    logger.warning("insert into %s rejected: duplicate key %r", self.name, key.values)
                    return False
                msg = f"{self.name}: duplicate key {key.values!r} replaces the indexed tuple"
                logger.warning(msg)
                warnings.warn(msg, DuplicateKeyWarning, stacklevel=2)
            self.rows.append(tup)
            self.index.put(key, tup)
        return True

    def _find_by_key(self, key: CompositeKey) -> Optional[Tuple[Any, ...]]:
        if self.index.enabled:
            return self.index.get(key)
        for row in reversed(self.rows):
            if self.key_of(row) == key:
                return row
        return None

    def lookup(self, key_value) -> Optional[Tuple[Any, ...]]:
        """Point lookup by primary key; None when absent."""
        key = self._coerce_key(key_value)
        with self._lock:
            return self._find_by_key(key)

    def _coerce_key(self, key_value) -> CompositeKey:
        if isinstance(key_value, CompositeKey):
            key = key_value
        elif isinstance(key_value, (tuple, list)):
            key = CompositeKey(tuple(key_value))
        else:
            key = CompositeKey.of(key_value)
        _assert(len(key) == len(self.key),
                f"{self.name}: key value {key.values!r} does not match key {list(self.key)}", KeyArityError)
        return key

    # Algebra operators

    def project(self, attributes, name: Optional[str] = None) -> "Relation":
        return project(self, attributes, name)

    def select(self, condition, name: Optional[str] = None) -> "Relation":
        """Predicate form when condition is callable, primary-key form otherwise."""
        if callable(condition):
            return select(self, condition, name)
        return select_key(self, condition, name)

    def union(self, other: "Relation", name: Optional[str] = None) -> "Relation":
        return union(self, other, name)

    def minus(self, other: "Relation", name: Optional[str] = None) -> "Relation":
        return minus(self, other, name)

    def intersect(self, other: "Relation", name: Optional[str] = None) -> "Relation":
        return intersect(self, other, name)

    def join(self, *args, name: Optional[str] = None, algorithm: Optional[str] = None) -> "Relation":
        """join(other) is a natural join; join(attrs1, attrs2, other) is an equi-join."""
        if len(args) == 1:
            return natural_join(self, args[0], name, algorithm)
        if len(args) == 3:
            return equi_join(self, args[2], args[0], args[1], name, algorithm)
        raise TypeError(f"join() takes 1 or 3 positional arguments ({len(args)} given)")

########################
# Core Operations
########################

def _derived_name(rel: Relation, name: Optional[str]) -> str:
    return name or rel.namer(rel.name)

def project(rel: Relation, attributes, name: Optional[str] = None) -> Relation:
    attrs = _names(attributes)
    logger.debug("RA> %s.project(%s)", rel.name, " ".join(attrs))
    idxs = rel.schema.columns_of(attrs)
    new_key = rel.key if set(rel.key) <= set(attrs) else attrs
    schema = Schema(_derived_name(rel, name), attrs, rel.schema.domains_of(attrs), new_key)
    return rel.derive(schema, [tuple(row[i] for i in idxs) for row in rel.snapshot()])

def select(rel: Relation, predicate: Callable[[Tuple[Any, ...]], bool], name: Optional[str] = None) -> Relation:
    logger.debug("RA> %s.select(%r)", rel.name, predicate)
    rows = [row for row in rel.snapshot() if predicate(row)]
    return rel.derive(rel.schema.renamed(_derived_name(rel, name)), rows)

def select_key(rel: Relation, key_value, name: Optional[str] = None) -> Relation:
    key = rel._coerce_key(key_value)
    logger.debug("RA> %s.select(%r)", rel.name, key)
    row = rel.lookup(key)
    return rel.derive(rel.schema.renamed(_derived_name(rel, name)), [row] if row is not None else [])

def union(r1: Relation, r2: Relation, name: Optional[str] = None) -> Relation:
    logger.debug("RA> %s.union(%s)", r1.name, r2.name)
    _assert_compatible("Union", r1, r2)
    rows = r1.snapshot()
    seen = set(rows)
    for row in r2.snapshot():
        if row not in seen:
            rows.append(row)
            seen.add(row)
    return r1.derive(r1.schema.renamed(_derived_name(r1, name)), rows)

def minus(r1: Relation, r2: Relation, name: Optional[str] = None) -> Relation:
    logger.debug("RA> %s.minus(%s)", r1.name, r2.name)
    _assert_compatible("Minus", r1, r2)
    set2 = set(r2.snapshot())
    rows = [r for r in r1.snapshot() if r not in set2]
    return r1.derive(r1.schema.renamed(_derived_name(r1, name)), rows)

def intersect(r1: Relation, r2: Relation, name: Optional[str] = None) -> Relation:
    logger.debug("RA> %s.intersect(%s)", r1.name, r2.name)
    _assert_compatible("Intersect", r1, r2)
    set2 = set(r2.snapshot())
    rows = [r for r in r1.snapshot() if r in set2]
    return r1.derive(r1.schema.renamed(_derived_name(r1, name)), rows)

########################
# Joins
########################

def disambiguate(left: Iterable[str], right: Iterable[str], suffix: Optional[str] = None) -> List[str]:
    """Rename right-side names that collide with left-side ones by appending suffix."""
    suffix = suffix or rel_config.JOIN_SUFFIX
    taken = set(left)
    out = []
    for attr in right:
        new = attr
        if new in taken:
            new = attr + suffix
            # a left attribute may already carry the suffixed name
            while new in taken:
                new += suffix
        taken.add(new)
        out.append(new)
    return out

def _nested_loop_pairs(lrows, rrows, lcols, rcols):
    for lrow in lrows:
        for rrow in rrows:
            if all(lrow[i] == rrow[j] for i, j in zip(lcols, rcols)):
                yield lrow, rrow

def _self_equal(values) -> bool:
    # nan != nan, but dict lookups match it by identity
    return all(v == v for v in values)

def _hash_pairs(lrows, rrows, lcols, rcols):
    table: Dict[Tuple[Any, ...], List[Tuple[Any, ...]]] = {}
    for rrow in rrows:
        rkey = tuple(rrow[j] for j in rcols)
        if _self_equal(rkey):
            table.setdefault(rkey, []).append(rrow)
    for lrow in lrows:
        lkey = tuple(lrow[i] for i in lcols)
        if not _self_equal(lkey):
            continue
        for rrow in table.get(lkey, ()):
            yield lrow, rrow

def _index_pairs(lrows, right: Relation, lcols):
    for lrow in lrows:
        key = CompositeKey.extract(lrow, lcols)
        if not _self_equal(key.values):
            continue
        rrow = right.index.get(key)
        if rrow is not None:
            yield lrow, rrow

_JOIN_ALGORITHMS = ("nested_loop", "hash", "index")

def _match_pairs(left: Relation, right: Relation, lcols: List[int], rcols: List[int],
                 algorithm: Optional[str] = None):
    algorithm = algorithm or rel_config.DEFAULT_JOIN_ALGORITHM
    _assert(algorithm in _JOIN_ALGORITHMS,
            f"Unknown join algorithm {algorithm!r}; expected one of {list(_JOIN_ALGORITHMS)}", ValueError)
    lrows, rrows = left.snapshot(), right.snapshot()
    if algorithm == "index":
        on_key = rcols == right._key_cols
        unique = right.index.enabled and len(right.index) == len(rrows)
        if on_key and unique:
            return list(_index_pairs(lrows, right, lcols))
        logger.debug("index join on %s not possible (key match=%s, unique index=%s); using hash join",
                     right.name, on_key, unique)
        algorithm = "hash"
    if algorithm == "hash":
        return list(_hash_pairs(lrows, rrows, lcols, rcols))
    return list(_nested_loop_pairs(lrows, rrows, lcols, rcols))

def equi_join(left: Relation, right: Relation, left_attrs, right_attrs,
              name: Optional[str] = None, algorithm: Optional[str] = None) -> Relation:
    """Tuples of left and right whose left_attrs[i] equal right_attrs[i] for every i.

    Result attributes are the left ones followed by the right ones, colliding
    right names suffixed with "2". The key is the left relation's key.
    """
    t_attrs, u_attrs = _names(left_attrs), _names(right_attrs)
    logger.debug("RA> %s.join(%s, %s, %s)", left.name, " ".join(t_attrs), " ".join(u_attrs), right.name)
    _assert(len(t_attrs) == len(u_attrs),
            f"Join: {len(t_attrs)} left attributes {t_attrs} vs {len(u_attrs)} right attributes {u_attrs}",
            JoinArityError)
    lcols = left.schema.columns_of(t_attrs)
    rcols = right.schema.columns_of(u_attrs)

    out_attrs = list(left.attributes) + disambiguate(left.attributes, right.attributes)
    schema = Schema(_derived_name(left, name), out_attrs, left.domains + right.domains, left.key)
    rows = [lrow + rrow for lrow, rrow in _match_pairs(left, right, lcols, rcols, algorithm)]
    return left.derive(schema, rows)

def natural_join(left: Relation, right: Relation, name: Optional[str] = None,
                 algorithm: Optional[str] = None) -> Relation:
    """Equi-join on every attribute name the two schemas share, keeping one copy of each."""
    logger.debug("RA> %s.join(%s)", left.name, right.name)
    common = [a for a in left.attributes if right.schema.find(a) is not None]
    lcols = left.schema.columns_of(common)
    rcols = right.schema.columns_of(common)
    keep = [j for j, a in enumerate(right.attributes) if a not in common]

    out_attrs = list(left.attributes) + [right.attributes[j] for j in keep]
    out_domains = left.domains + tuple(right.domains[j] for j in keep)
    schema = Schema(_derived_name(left, name), out_attrs, out_domains, left.key)
    rows = [lrow + tuple(rrow[j] for j in keep)
            for lrow, rrow in _match_pairs(left, right, lcols, rcols, algorithm)]
    return left.derive(schema, rows)

########################
# Serialization
########################

def serialize(rel: Relation) -> Dict[str, Any]:
    return {
        "version": rel_config.SERIALIZATION_VERSION,
        "name": rel.name,
        "attributes": list(rel.attributes),
        "domains": [d.value for d in rel.domains],
        "key": list(rel.key),
        "index": rel.index.kind,
        "rows": [list(r) for r in rel.snapshot()],
    }

def deserialize(record: Dict[str, Any], namer: Optional[NameGenerator] = None) -> Relation:
    _assert(isinstance(record, dict), f"Expected a relation record, got {type(record).__name__}",
            SerializationError)
    missing = [k for k in ("name", "attributes", "domains", "key", "rows") if k not in record]
    _assert(not missing, f"Relation record is missing {missing}", SerializationError)
    version = record.get("version", rel_config.SERIALIZATION_VERSION)
    _assert(version == rel_config.SERIALIZATION_VERSION,
            f"Unsupported relation record version: {version}", SerializationError)

    try:
        schema = Schema(record["name"], record["attributes"], record["domains"], record["key"])
        rows = [tuple(r) for r in record["rows"]]
    except (RelAlgError, TypeError, ValueError) as e:
        raise SerializationError(f"Malformed relation record {record.get('name')!r}: {e}") from e
    for row in rows:
        try:
            check_tuple(row, schema)
        except TypeMismatchError as e:
            raise SerializationError(f"Corrupt row in {schema.name}: {e}") from e
    try:
        return Relation(schema, rows, index=record.get("index"), namer=namer)
    except ValueError as e:
        raise SerializationError(f"Malformed relation record {schema.name!r}: {e}") from e

def dumps(rel: Relation) -> str:
    return json.dumps(serialize(rel))

def loads(text: str) -> Relation:
    try:
        record = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Relation record is not valid JSON: {e}") from e
    return deserialize(record)

def _store_path(name: str, directory: Optional[str]) -> str:
    return os.path.join(directory or rel_config.STORE_DIR, name + rel_config.STORE_EXT)

def save(rel: Relation, directory: Optional[str] = None) -> str:
    path = _store_path(rel.name, directory)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps(rel))
    logger.info("saved %s (%d rows) to %s", rel.name, len(rel), path)
    return path

def load(name: str, directory: Optional[str] = None) -> Relation:
    path = _store_path(name, directory)
    with open(path, "r", encoding="utf-8") as f:
        rel = loads(f.read())
    logger.info("loaded %s (%d rows) from %s", rel.name, len(rel), path)
    return rel
