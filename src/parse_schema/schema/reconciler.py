"""
Schema reconciliation core logic for parse-schema.

Plans the create/update/delete requests that bring a Parse Server schema in
line with the local schema description, and issues them one by one.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from ..config import ReconcileOptions
from .equality import classes_equal, deep_equals
from .models import ClassSchema
from .operations import OperationType, ReconciliationPlan, SchemaOperation
from .prefix import add_prefix, add_prefix_to_names, filter_prefixed

if TYPE_CHECKING:
    from ..client.base import SchemaClient


logger = logging.getLogger(__name__)


class ReconciliationStatus(str, Enum):
    """Status of reconciliation operations."""

    SUCCESS = "success"
    DRY_RUN = "dry_run"
    FAILED = "failed"


@dataclass
class ClassDiff:
    """Field-level difference between a local and a remote class."""

    class_name: str
    fields_to_create: List[str] = field(default_factory=list)
    fields_to_delete: List[str] = field(default_factory=list)
    clp_changed: bool = False

    @property
    def changed_fields(self) -> List[str]:
        """Fields that must be dropped and recreated."""
        return [f for f in self.fields_to_create if f in self.fields_to_delete]


@dataclass
class ReconciliationResult:
    """Result of a reconciliation run."""

    status: ReconciliationStatus
    operations: List[SchemaOperation]
    skipped: List[str]
    execution_time_ms: float

    @property
    def successful_operations(self) -> int:
        """Count of operations the server accepted."""
        return sum(1 for op in self.operations if op.executed)

    @property
    def failed_operations(self) -> int:
        """Count of failed operations."""
        return sum(1 for op in self.operations if op.error)


def diff_class(local: ClassSchema, remote: ClassSchema) -> ClassDiff:
    """
    Compute the field-level diff between two versions of one class.

    A field present on both sides with different attributes is listed in
    both ``fields_to_create`` and ``fields_to_delete``: Parse cannot change
    the type of an existing field in place.
    """
    diff = ClassDiff(class_name=local.class_name)

    for name, local_field in local.fields.items():
        remote_field = remote.fields.get(name)
        if remote_field is None:
            diff.fields_to_create.append(name)
        elif not deep_equals(local_field.to_document(), remote_field.to_document()):
            diff.fields_to_delete.append(name)
            diff.fields_to_create.append(name)

    for name in remote.fields:
        if name not in local.fields:
            diff.fields_to_delete.append(name)

    diff.clp_changed = not deep_equals(
        local.class_level_permissions, remote.class_level_permissions
    )
    return diff


def plan_converge(
    local: List[ClassSchema],
    remote: List[ClassSchema],
    options: Optional[ReconcileOptions] = None,
) -> ReconciliationPlan:
    """
    Plan the requests that make *remote* match *local*.

    Local classes are handled first, in local order; remote-only classes are
    deleted afterwards so nothing a create or update still points at is
    dropped early.
    """
    options = options or ReconcileOptions()
    local = add_prefix(local, options.prefix)
    remote = filter_prefixed(remote, options.prefix)

    remote_by_name: Dict[str, ClassSchema] = {}
    for schema in remote:
        remote_by_name.setdefault(schema.class_name, schema)

    plan = ReconciliationPlan()

    for local_class in local:
        remote_class = remote_by_name.get(local_class.class_name)

        if remote_class is None:
            plan.operations.append(SchemaOperation.create(local_class.to_document()))
            continue

        if classes_equal(local_class, remote_class):
            continue

        _plan_update(plan, local_class, diff_class(local_class, remote_class), options)

    local_names = {schema.class_name for schema in local}
    for remote_class in remote:
        if remote_class.class_name in local_names:
            continue
        if remote_class.class_name == options.prefix:
            # no local document can name this class
            _skip(plan, f"Skip class named exactly the prefix: {remote_class.class_name}")
            continue
        if options.delete_classes:
            plan.operations.append(SchemaOperation.drop(remote_class.class_name))
        else:
            _skip(plan, f"Skip deleting class: {remote_class.class_name}")

    return plan


def _plan_update(
    plan: ReconciliationPlan,
    local_class: ClassSchema,
    diff: ClassDiff,
    options: ReconcileOptions,
) -> None:
    fields_to_create = list(diff.fields_to_create)
    clp = local_class.class_level_permissions

    if diff.fields_to_delete or diff.clp_changed:
        if options.delete_fields:
            plan.operations.append(
                SchemaOperation.delete_fields(
                    local_class.class_name, diff.fields_to_delete, clp
                )
            )
        elif diff.fields_to_delete:
            _skip(
                plan,
                f"Skip deleting fields of {local_class.class_name}: "
                + ", ".join(diff.fields_to_delete),
            )
            for name in diff.changed_fields:
                fields_to_create.remove(name)
                _skip(plan, f"Can't update field: {local_class.class_name}.{name}")

    if fields_to_create or diff.clp_changed:
        plan.operations.append(
            SchemaOperation.write_fields(
                local_class.class_name,
                {name: local_class.fields[name].to_document() for name in fields_to_create},
                clp,
            )
        )


def plan_prune(
    local: List[ClassSchema],
    remote: List[ClassSchema],
    prefix: Optional[str] = None,
) -> ReconciliationPlan:
    """Plan the deletion of every remote class that has a local counterpart."""
    local = add_prefix_to_names(local, prefix)
    remote_names = {schema.class_name for schema in filter_prefixed(remote, prefix)}

    plan = ReconciliationPlan()
    for local_class in local:
        if local_class.class_name in remote_names:
            plan.operations.append(SchemaOperation.drop(local_class.class_name))
    return plan


def _skip(plan: ReconciliationPlan, message: str) -> None:
    logger.warning(message)
    plan.skipped.append(message)


class SchemaReconciler:
    """
    Core schema reconciliation engine for parse-schema.

    Plans operations with ``plan_converge`` / ``plan_prune`` and applies
    them through a ``SchemaClient``. Every request is awaited before the
    next one starts. There is no rollback: when a request fails the error
    propagates and the requests already applied stand. Running the same
    reconciliation again converges.
    """

    def __init__(self, client: "SchemaClient"):
        self.client = client

    async def converge(
        self,
        local: List[ClassSchema],
        remote: List[ClassSchema],
        options: Optional[ReconcileOptions] = None,
    ) -> ReconciliationResult:
        """Make the remote schema match *local*."""
        options = options or ReconcileOptions()
        plan = plan_converge(local, remote, options)
        return await self.apply(plan, dry_run=options.dry_run)

    async def prune(
        self,
        local: List[ClassSchema],
        remote: List[ClassSchema],
        options: Optional[ReconcileOptions] = None,
    ) -> ReconciliationResult:
        """Delete the remote classes named in *local*."""
        options = options or ReconcileOptions()
        plan = plan_prune(local, remote, options.prefix)
        return await self.apply(plan, dry_run=options.dry_run)

    async def apply(
        self, plan: ReconciliationPlan, dry_run: bool = False
    ) -> ReconciliationResult:
        """
        Issue the planned operations in order.

        Raises:
            RemoteError: From the first request the server refuses
        """
        start_time = asyncio.get_event_loop().time()

        result = ReconciliationResult(
            status=ReconciliationStatus.DRY_RUN if dry_run else ReconciliationStatus.SUCCESS,
            operations=plan.operations,
            skipped=plan.skipped,
            execution_time_ms=0.0,
        )

        if dry_run:
            for operation in plan.operations:
                logger.info(f"[dry run] {operation.description}")
            return result

        try:
            for operation in plan.operations:
                await self._execute(operation)
        except Exception:
            result.status = ReconciliationStatus.FAILED
            logger.error(
                f"Reconciliation aborted after {result.successful_operations} of "
                f"{len(plan.operations)} operations"
            )
            raise
        finally:
            result.execution_time_ms = (
                asyncio.get_event_loop().time() - start_time
            ) * 1000

        if plan.is_empty:
            logger.info("No changes needed")
        else:
            logger.info(
                f"Applied {result.successful_operations} operations "
                f"({result.execution_time_ms:.1f}ms)"
            )

        return result

    async def _execute(self, operation: SchemaOperation) -> None:
        logger.info(operation.description)
        start_time = asyncio.get_event_loop().time()

        try:
            if operation.operation_type == OperationType.CREATE_CLASS:
                await self.client.create_class(operation.payload())
            elif operation.operation_type == OperationType.UPDATE_CLASS:
                await self.client.update_class(
                    operation.class_name,
                    operation.fields,
                    operation.class_level_permissions,
                )
            else:
                await self.client.delete_class(operation.class_name)
        except Exception as e:
            operation.error = str(e)
            logger.error(f"{operation.description} failed: {e}")
            raise

        operation.executed = True
        operation.execution_time_ms = (
            asyncio.get_event_loop().time() - start_time
        ) * 1000
