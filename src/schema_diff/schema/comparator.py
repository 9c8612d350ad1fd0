"""Schema comparison using set operations.

Compares object lists and per-table column lists from two catalogs.
Pure logic -- no I/O, no database connections.

Usage:
    from schema_diff.schema.comparator import diff_columns, diff_objects

    objects = diff_objects(local_objects, remote_objects)
    for table in objects.common_tables:
        text = diff_columns(local_columns[table], remote_columns[table])
        if text:
            print(f"-- {table}")
            print(text)
"""

from collections.abc import Sequence

from schema_diff.schema.models import CatalogObject, ColumnDescriptor, DiffMode, ObjectDiff

COMPARABLE_TYPE = "TABLE"


def diff_objects(
    local: Sequence[CatalogObject],
    remote: Sequence[CatalogObject],
) -> ObjectDiff:
    """Compute the object-level difference between two catalogs.

    Membership is tested on the ``(name, type)`` key with one hash set per
    side, so the whole comparison is O(n + m).

    Args:
        local: Objects of the local catalog, in catalog order.
        remote: Objects of the remote catalog, in catalog order.

    Returns:
        ``ObjectDiff`` with:

        - ``missing_from_local``: remote objects absent from local, in
          remote order
        - ``extraneous_in_local``: local objects absent from remote, in
          local order
        - ``common_tables``: names of ``TABLE`` objects present in both, in
          remote order

    Examples:
        >>> a = CatalogObject(name="A", type="TABLE")
        >>> b = CatalogObject(name="B", type="TABLE")
        >>> c = CatalogObject(name="C", type="TABLE")
        >>> result = diff_objects([a, b], [a, c])
        >>> [o.name for o in result.missing_from_local]
        ['C']
        >>> [o.name for o in result.extraneous_in_local]
        ['B']
        >>> result.common_tables
        ['A']
    """
    local_keys: set[tuple[str, str]] = {o.key for o in local}
    remote_keys: set[tuple[str, str]] = {o.key for o in remote}

    missing: list[CatalogObject] = []
    common_tables: list[str] = []
    for obj in remote:
        if obj.key not in local_keys:
            missing.append(obj)
        elif obj.type == COMPARABLE_TYPE:
            common_tables.append(obj.name)

    extraneous: list[CatalogObject] = [o for o in local if o.key not in remote_keys]

    return ObjectDiff(
        missing_from_local=missing,
        extraneous_in_local=extraneous,
        common_tables=common_tables,
    )


def diff_columns_statements(
    local: Sequence[ColumnDescriptor],
    remote: Sequence[ColumnDescriptor],
) -> str:
    """Describe column discrepancies as ``ALTER TABLE`` statements.

    The statements turn the local table into the remote one:

    - remote column missing locally: ``ADD``
    - same name, different signature: ``MODIFY`` with the old local
      signature as a trailing comment
    - local column missing remotely: ``DROP``

    Examples:
        >>> local = [ColumnDescriptor(table="A", name="ID", type_signature="NUMBER(10,0)")]
        >>> remote = [ColumnDescriptor(table="A", name="ID", type_signature="NUMBER(12,2)")]
        >>> diff_columns_statements(local, remote)
        'ALTER TABLE A MODIFY ID NUMBER(12,2); --NUMBER(10,0)\\n'
    """
    local_sorted = sorted(local, key=lambda c: c.name)
    remote_sorted = sorted(remote, key=lambda c: c.name)

    local_by_name: dict[str, ColumnDescriptor] = {c.name: c for c in local_sorted}
    remote_names: set[str] = {c.name for c in remote_sorted}

    lines: list[str] = []
    for rcol in remote_sorted:
        lcol = local_by_name.get(rcol.name)
        if lcol is None:
            lines.append(f"ALTER TABLE {rcol.table} ADD {rcol.name} {rcol.type_signature};\n")
        elif lcol.type_signature != rcol.type_signature:
            lines.append(
                f"ALTER TABLE {rcol.table} MODIFY {rcol.name} {rcol.type_signature}; "
                f"--{lcol.type_signature}\n"
            )

    for lcol in local_sorted:
        if lcol.name not in remote_names:
            lines.append(f"ALTER TABLE {lcol.table} DROP {lcol.name};\n")

    return "".join(lines)


def diff_columns_text(
    local: Sequence[ColumnDescriptor],
    remote: Sequence[ColumnDescriptor],
) -> str:
    """Describe column discrepancies as ``-``/``+`` lines.

    Columns are compared on their full rendering (``"<name> <signature>"``),
    so a changed type shows up as one ``-`` line for the remote rendering
    and one ``+`` line for the local one.
    """
    local_rendered = sorted(c.render() for c in local)
    remote_rendered = sorted(c.render() for c in remote)
    local_set = set(local_rendered)
    remote_set = set(remote_rendered)

    lines = [f"-{line}\n" for line in remote_rendered if line not in local_set]
    lines += [f"+{line}\n" for line in local_rendered if line not in remote_set]
    return "".join(lines)


def diff_columns(
    local: Sequence[ColumnDescriptor],
    remote: Sequence[ColumnDescriptor],
    mode: DiffMode = "statement",
) -> str:
    """Diff one table's columns using the selected mode.

    The two modes are not equivalent for type-changed columns: statement
    mode reports one ``MODIFY``, text mode one removal plus one addition.

    Returns:
        Diff text, or ``""`` when the column lists match.
    """
    if mode == "text":
        return diff_columns_text(local, remote)
    if mode == "statement":
        return diff_columns_statements(local, remote)
    raise ValueError(f"Unknown diff mode: {mode!r}")
