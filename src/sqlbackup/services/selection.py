"""
Database selection: which databases a mode command operates on.
"""

from typing import Iterable, List

from ..arguments import ParsedArguments


def select_databases(args: ParsedArguments, catalog: Iterable[str]) -> List[str]:
    """Compute the target databases of an invocation.

    Args:
        args: Parsed arguments
        catalog: All database names known to the server, in server order.
            Only consulted for /ALL.

    Returns:
        - [] when neither /ALL nor /DB was given
        - the /DB names in command line order
        - for /ALL, the catalog without the listed names (case-insensitive),
          in catalog order
    """
    if args.use_all_databases is None:
        return []
    if args.use_all_databases is False:
        return list(args.databases)

    excluded = {name.casefold() for name in args.databases}
    selected = []
    for name in catalog:
        key = name.casefold()
        if key in excluded:
            continue
        excluded.add(key)
        selected.append(name)
    return selected
