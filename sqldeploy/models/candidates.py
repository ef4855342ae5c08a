from ..schemas import EXECUTABLE_STATUSES, CandidateFileList, ChangeSet
from .path_filter import matches_glob


def build_candidates(
    change_set: ChangeSet, sql_glob: str, sort: bool = False
) -> CandidateFileList:
    """Flatten added, modified and renamed paths into the execution order.

    Deleted files are never candidates. The first occurrence of a path
    wins, so the list follows the diff listing order unless sort is set.
    """
    paths = []
    seen = set()
    for change in change_set.changes:
        if change.status not in EXECUTABLE_STATUSES:
            continue
        if change.file_path in seen or not matches_glob(change.file_path, sql_glob):
            continue
        seen.add(change.file_path)
        paths.append(change.file_path)

    if sort:
        paths.sort()
    return CandidateFileList(paths=paths)
