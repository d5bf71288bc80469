# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/sandbox/interpreter.py
"""
Capability-restricted interpreter for configuration programs.

The rewritten configuration source is parsed with ``ast`` and walked node by
node; nothing is compiled or exec'd. Evaluated code sees only the bindings
passed in (in practice: ``__import__``) plus what it defines itself:

- no builtins at all
- no attribute names starting with ``_``, no ``str.format`` escapes, no frame
  or generator internals
- only the statements/expressions listed in ``_exec`` / ``_eval``
- ``await`` only in top-level statements; each such statement has its awaits
  resolved first (innermost first), then runs synchronously
- ``lambda`` / ``def`` produce plain callables the host can invoke later
  (rule handlers, dynamic shortcuts)
"""
from __future__ import annotations

import ast
import inspect
import logging
import operator
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from slidecraft.errors import SandboxError

logger = logging.getLogger(__name__)

MAX_LOOP_ITERATIONS = 100_000
MAX_REPEAT = 1_000_000
MAX_EXPONENT = 10_000

BANNED_ATTRIBUTES = frozenset({
    "format", "format_map", "mro",
    "gi_frame", "gi_code", "gi_yieldfrom",
    "cr_frame", "cr_code", "cr_await",
    "ag_frame", "ag_code", "ag_await",
    "f_globals", "f_locals", "f_builtins", "f_back", "f_code",
    "tb_frame", "tb_next",
})

_BIN_OPS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
    ast.BitAnd: operator.and_,
    ast.BitOr: operator.or_,
    ast.BitXor: operator.xor,
    ast.LShift: operator.lshift,
    ast.RShift: operator.rshift,
}
_UNARY_OPS: Dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: operator.not_,
    ast.Invert: operator.invert,
}
_COMPARE_OPS: Dict[type, Callable[[Any, Any], bool]] = {
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
    ast.In: lambda a, b: a in b,
    ast.NotIn: lambda a, b: a not in b,
}
# awaits below these nodes would run conditionally or late
_DEFERRED_NODES = (
    ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda,
    ast.ListComp, ast.SetComp, ast.DictComp, ast.GeneratorExp,
    ast.If, ast.For, ast.While, ast.IfExp, ast.BoolOp,
)


class _Return(Exception):
    def __init__(self, value: Any):
        self.value = value


class _Break(Exception):
    pass


class _Continue(Exception):
    pass


class _Scope:
    __slots__ = ("vars", "parent")

    def __init__(self, values: Optional[Dict[str, Any]] = None, parent: Optional["_Scope"] = None):
        self.vars: Dict[str, Any] = values if values is not None else {}
        self.parent = parent

    def lookup(self, name: str, node: ast.AST) -> Any:
        scope: Optional[_Scope] = self
        while scope is not None:
            if name in scope.vars:
                return scope.vars[name]
            scope = scope.parent
        raise SandboxError(f"name {name!r} is not defined", getattr(node, "lineno", None))


def _check_attribute(name: str, node: ast.AST) -> None:
    if name.startswith("_") or name in BANNED_ATTRIBUTES:
        raise SandboxError(f"access to attribute {name!r} is not allowed", getattr(node, "lineno", None))


class SandboxInterpreter:

    def __init__(self, bindings: Mapping[str, Any], label: str = "<config>",
                 max_iterations: int = MAX_LOOP_ITERATIONS):
        self.label = label
        self.max_iterations = max_iterations
        self.globals = _Scope(dict(bindings))
        self._awaited: Dict[int, Any] = {}

    async def run(self, source: str) -> Tuple[Any, Dict[str, Any]]:
        """Execute ``source``; returns (value of the top-level ``return``, module bindings)."""
        try:
            tree = ast.parse(source, filename=self.label)
        except SyntaxError as e:
            raise SandboxError(f"invalid syntax in {self.label}: {e.msg}", e.lineno) from e

        scope = _Scope(parent=self.globals)
        for stmt in tree.body:
            await self._resolve_awaits(stmt, scope)
            try:
                self._exec(stmt, scope)
            except _Return as r:
                return r.value, dict(scope.vars)
            except (_Break, _Continue):
                raise SandboxError("'break'/'continue' outside loop", stmt.lineno) from None
            finally:
                self._awaited.clear()
        return None, dict(scope.vars)

    # ----------------------------------------------------------------------------------
    # await
    # ----------------------------------------------------------------------------------

    def _collect_awaits(self, node: ast.AST, out: List[ast.Await], deferred: bool = False) -> None:
        child_deferred = deferred or isinstance(node, _DEFERRED_NODES)
        for child in ast.iter_child_nodes(node):
            self._collect_awaits(child, out, child_deferred)
        if isinstance(node, ast.Await):
            if deferred:
                raise SandboxError("'await' is only allowed in top-level statements", node.lineno)
            out.append(node)

    async def _resolve_awaits(self, stmt: ast.stmt, scope: _Scope) -> None:
        pending: List[ast.Await] = []
        self._collect_awaits(stmt, pending)
        for node in pending:
            value = self._eval(node.value, scope)
            if not inspect.isawaitable(value):
                raise SandboxError("object is not awaitable", node.lineno)
            self._awaited[id(node)] = await value

    # ----------------------------------------------------------------------------------
    # statements
    # ----------------------------------------------------------------------------------

    def _exec_block(self, body: List[ast.stmt], scope: _Scope) -> None:
        for stmt in body:
            self._exec(stmt, scope)

    def _exec(self, node: ast.stmt, scope: _Scope) -> None:
        if isinstance(node, ast.Expr):
            self._eval(node.value, scope)
        elif isinstance(node, ast.Assign):
            value = self._eval(node.value, scope)
            for target in node.targets:
                self._assign(target, value, scope)
        elif isinstance(node, ast.AnnAssign):
            if node.value is not None:
                self._assign(node.target, self._eval(node.value, scope), scope)
        elif isinstance(node, ast.AugAssign):
            current = self._eval(_as_load(node.target), scope)
            value = self._binop(node.op, current, self._eval(node.value, scope), node)
            self._assign(node.target, value, scope)
        elif isinstance(node, ast.Return):
            raise _Return(self._eval(node.value, scope) if node.value is not None else None)
        elif isinstance(node, ast.If):
            self._exec_block(node.body if self._eval(node.test, scope) else node.orelse, scope)
        elif isinstance(node, ast.For):
            self._exec_for(node, scope)
        elif isinstance(node, ast.While):
            self._exec_while(node, scope)
        elif isinstance(node, ast.Break):
            raise _Break()
        elif isinstance(node, ast.Continue):
            raise _Continue()
        elif isinstance(node, ast.Pass):
            pass
        elif isinstance(node, ast.FunctionDef):
            if node.decorator_list:
                raise SandboxError("decorators are not allowed", node.lineno)
            scope.vars[node.name] = self._make_function(node.args, node.body, scope, node.name, False)
        else:
            raise SandboxError(f"unsupported statement: {type(node).__name__}", getattr(node, "lineno", None))

    def _exec_for(self, node: ast.For, scope: _Scope) -> None:
        iterations = 0
        for item in self._eval(node.iter, scope):
            iterations += 1
            if iterations > self.max_iterations:
                raise SandboxError("loop iteration limit exceeded", node.lineno)
            self._assign(node.target, item, scope)
            try:
                self._exec_block(node.body, scope)
            except _Break:
                return
            except _Continue:
                continue
        self._exec_block(node.orelse, scope)

    def _exec_while(self, node: ast.While, scope: _Scope) -> None:
        iterations = 0
        while self._eval(node.test, scope):
            iterations += 1
            if iterations > self.max_iterations:
                raise SandboxError("loop iteration limit exceeded", node.lineno)
            try:
                self._exec_block(node.body, scope)
            except _Break:
                return
            except _Continue:
                continue
        self._exec_block(node.orelse, scope)

    def _assign(self, target: ast.expr, value: Any, scope: _Scope) -> None:
        if isinstance(target, ast.Name):
            scope.vars[target.id] = value
        elif isinstance(target, (ast.Tuple, ast.List)):
            self._unpack(target, value, scope)
        elif isinstance(target, ast.Subscript):
            container = self._eval(target.value, scope)
            if not isinstance(container, (dict, list)):
                raise SandboxError("item assignment is only allowed on dicts and lists", target.lineno)
            container[self._eval(target.slice, scope)] = value
        else:
            raise SandboxError(f"cannot assign to {type(target).__name__}", getattr(target, "lineno", None))

    def _unpack(self, target: ast.AST, value: Any, scope: _Scope) -> None:
        items = list(value)
        elts = target.elts
        starred = [i for i, e in enumerate(elts) if isinstance(e, ast.Starred)]
        if not starred:
            if len(items) != len(elts):
                raise ValueError(f"expected {len(elts)} values to unpack, got {len(items)}")
            for elt, item in zip(elts, items):
                self._assign(elt, item, scope)
            return
        at = starred[0]
        after = len(elts) - at - 1
        if len(items) < len(elts) - 1:
            raise ValueError(f"expected at least {len(elts) - 1} values to unpack, got {len(items)}")
        for elt, item in zip(elts[:at], items[:at]):
            self._assign(elt, item, scope)
        self._assign(elts[at].value, items[at:len(items) - after], scope)
        for elt, item in zip(elts[at + 1:], items[len(items) - after:]):
            self._assign(elt, item, scope)

    # ----------------------------------------------------------------------------------
    # expressions
    # ----------------------------------------------------------------------------------

    def _binop(self, op: ast.operator, left: Any, right: Any, node: ast.AST) -> Any:
        fn = _BIN_OPS.get(type(op))
        if fn is None:
            raise SandboxError(f"unsupported operator: {type(op).__name__}", getattr(node, "lineno", None))
        if isinstance(op, ast.Mult):
            for seq, count in ((left, right), (right, left)):
                if isinstance(seq, (str, list, tuple)) and isinstance(count, int) and count * max(len(seq), 1) > MAX_REPEAT:
                    raise SandboxError("sequence repetition too large", getattr(node, "lineno", None))
        if isinstance(op, ast.Pow) and isinstance(right, (int, float)) and abs(right) > MAX_EXPONENT:
            raise SandboxError("exponent too large", getattr(node, "lineno", None))
        return fn(left, right)

    def _eval_sequence(self, elts: List[ast.expr], scope: _Scope) -> List[Any]:
        out: List[Any] = []
        for elt in elts:
            if isinstance(elt, ast.Starred):
                out.extend(self._eval(elt.value, scope))
            else:
                out.append(self._eval(elt, scope))
        return out

    def _eval(self, node: ast.expr, scope: _Scope) -> Any:
        if isinstance(node, ast.Constant):
            return node.value
        if isinstance(node, ast.Name):
            return scope.lookup(node.id, node)
        if isinstance(node, ast.Await):
            try:
                return self._awaited[id(node)]
            except KeyError:
                raise SandboxError("'await' is only allowed in top-level statements", node.lineno) from None
        if isinstance(node, ast.List):
            return self._eval_sequence(node.elts, scope)
        if isinstance(node, ast.Tuple):
            return tuple(self._eval_sequence(node.elts, scope))
        if isinstance(node, ast.Set):
            return set(self._eval_sequence(node.elts, scope))
        if isinstance(node, ast.Dict):
            out: Dict[Any, Any] = {}
            for key, value in zip(node.keys, node.values):
                if key is None:
                    out.update(self._eval(value, scope))
                else:
                    out[self._eval(key, scope)] = self._eval(value, scope)
            return out
        if isinstance(node, ast.JoinedStr):
            return "".join(str(self._eval(v, scope)) for v in node.values)
        if isinstance(node, ast.FormattedValue):
            value = self._eval(node.value, scope)
            if node.conversion == ord("r"):
                value = repr(value)
            elif node.conversion == ord("a"):
                value = ascii(value)
            elif node.conversion == ord("s"):
                value = str(value)
            spec = self._eval(node.format_spec, scope) if node.format_spec is not None else ""
            return format(value, spec)
        if isinstance(node, ast.BinOp):
            return self._binop(node.op, self._eval(node.left, scope), self._eval(node.right, scope), node)
        if isinstance(node, ast.UnaryOp):
            return _UNARY_OPS[type(node.op)](self._eval(node.operand, scope))
        if isinstance(node, ast.BoolOp):
            result: Any = None
            for value_node in node.values:
                result = self._eval(value_node, scope)
                if isinstance(node.op, ast.And) and not result:
                    return result
                if isinstance(node.op, ast.Or) and result:
                    return result
            return result
        if isinstance(node, ast.Compare):
            left = self._eval(node.left, scope)
            for op, comparator in zip(node.ops, node.comparators):
                right = self._eval(comparator, scope)
                if not _COMPARE_OPS[type(op)](left, right):
                    return False
                left = right
            return True
        if isinstance(node, ast.IfExp):
            return self._eval(node.body if self._eval(node.test, scope) else node.orelse, scope)
        if isinstance(node, ast.Attribute):
            _check_attribute(node.attr, node)
            return getattr(self._eval(node.value, scope), node.attr)
        if isinstance(node, ast.Subscript):
            return self._eval(node.value, scope)[self._eval(node.slice, scope)]
        if isinstance(node, ast.Slice):
            return slice(
                self._eval(node.lower, scope) if node.lower is not None else None,
                self._eval(node.upper, scope) if node.upper is not None else None,
                self._eval(node.step, scope) if node.step is not None else None,
            )
        if isinstance(node, ast.Call):
            return self._call(node, scope)
        if isinstance(node, ast.Lambda):
            return self._make_function(node.args, node.body, scope, "<lambda>", True)
        if isinstance(node, ast.NamedExpr):
            value = self._eval(node.value, scope)
            scope.vars[node.target.id] = value
            return value
        if isinstance(node, (ast.ListComp, ast.SetComp, ast.GeneratorExp)):
            items = self._comprehension(node.generators, scope, lambda s: self._eval(node.elt, s))
            return set(items) if isinstance(node, ast.SetComp) else items
        if isinstance(node, ast.DictComp):
            pairs = self._comprehension(
                node.generators, scope, lambda s: (self._eval(node.key, s), self._eval(node.value, s)))
            return dict(pairs)
        raise SandboxError(f"unsupported expression: {type(node).__name__}", getattr(node, "lineno", None))

    def _call(self, node: ast.Call, scope: _Scope) -> Any:
        func = self._eval(node.func, scope)
        if not callable(func):
            raise SandboxError("object is not callable", node.lineno)
        args = self._eval_sequence(node.args, scope)
        kwargs: Dict[str, Any] = {}
        for kw in node.keywords:
            if kw.arg is None:
                kwargs.update(self._eval(kw.value, scope))
            else:
                kwargs[kw.arg] = self._eval(kw.value, scope)
        return func(*args, **kwargs)

    def _comprehension(self, generators: List[ast.comprehension], scope: _Scope,
                       emit: Callable[[_Scope], Any]) -> List[Any]:
        out: List[Any] = []
        local = _Scope(parent=scope)

        def walk(index: int) -> None:
            if index == len(generators):
                out.append(emit(local))
                if len(out) > self.max_iterations:
                    raise SandboxError("comprehension size limit exceeded", generators[0].target.lineno)
                return
            gen = generators[index]
            if gen.is_async:
                raise SandboxError("async comprehensions are not allowed", gen.target.lineno)
            for item in self._eval(gen.iter, local):
                self._assign(gen.target, item, local)
                if all(self._eval(cond, local) for cond in gen.ifs):
                    walk(index + 1)

        walk(0)
        return out

    # ----------------------------------------------------------------------------------
    # closures
    # ----------------------------------------------------------------------------------

    def _make_function(self, args: ast.arguments, body: Any, scope: _Scope, name: str,
                       expression: bool) -> Callable[..., Any]:
        positional = [a.arg for a in args.posonlyargs + args.args]
        pos_defaults = [self._eval(d, scope) for d in args.defaults]
        defaults = dict(zip(positional[len(positional) - len(pos_defaults):], pos_defaults))
        kwonly = [a.arg for a in args.kwonlyargs]
        for arg, default in zip(kwonly, args.kw_defaults):
            if default is not None:
                defaults[arg] = self._eval(default, scope)
        vararg = args.vararg.arg if args.vararg else None
        kwarg = args.kwarg.arg if args.kwarg else None
        interpreter = self

        def function(*call_args: Any, **call_kwargs: Any) -> Any:
            local = _Scope(parent=scope)
            extra: List[Any] = []
            for i, value in enumerate(call_args):
                if i < len(positional):
                    local.vars[positional[i]] = value
                elif vararg:
                    extra.append(value)
                else:
                    raise TypeError(f"{name}() takes {len(positional)} positional arguments but {len(call_args)} were given")
            extra_kw: Dict[str, Any] = {}
            for key, value in call_kwargs.items():
                if key in positional or key in kwonly:
                    if key in local.vars:
                        raise TypeError(f"{name}() got multiple values for argument {key!r}")
                    local.vars[key] = value
                elif kwarg:
                    extra_kw[key] = value
                else:
                    raise TypeError(f"{name}() got an unexpected keyword argument {key!r}")
            for param in positional + kwonly:
                if param not in local.vars:
                    if param not in defaults:
                        raise TypeError(f"{name}() missing required argument {param!r}")
                    local.vars[param] = defaults[param]
            if vararg:
                local.vars[vararg] = tuple(extra)
            if kwarg:
                local.vars[kwarg] = extra_kw

            if expression:
                return interpreter._eval(body, local)
            try:
                interpreter._exec_block(body, local)
            except _Return as r:
                return r.value
            return None

        function.__name__ = name
        function.__qualname__ = name
        return function


def _as_load(target: ast.expr) -> ast.expr:
    if isinstance(target, ast.Name):
        return ast.copy_location(ast.Name(id=target.id, ctx=ast.Load()), target)
    return target
