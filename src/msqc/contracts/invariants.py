"""Formal pipeline invariants.

This file documents what each stage MUST guarantee. Use it as a reviewer
anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "file_lists": [
        "All non-empty per-run file lists share one length N",
        "N is fixed before the first run is processed",
        "out_feat is empty or has length N",
    ],

    "join_index": [
        "Every consensus identification carries a UID",
        "Every consensus identification is stamped with cf_id (-1 = unassigned)",
        "Built once before the run loop; entries are never removed",
    ],

    "identifier_map": [
        "primary_ms_run_path lists are unique across protein identifications",
        "Synthesized IDs are stamped only after a successful lookup",
    ],

    "merge_back": [
        "Hit-less transient IDs are skipped",
        "Only ID-level and top-hit meta values are copied",
        "Copy is last-writer-wins in the fixed metric order",
    ],

    "report": [
        "Conflicts resolved before staged IDs are appended",
        "Summary rows never overwrite an existing custom metadata key",
    ],
}

# Which inputs are optional vs required
INPUT_REQUIREMENTS = {
    "in_cm": "REQUIRED",
    "out": "REQUIRED",
    "in_raw": "OPTIONAL",
    "in_postfdr": "OPTIONAL",
    "in_trafo": "OPTIONAL",
    "in_contaminants": "OPTIONAL",
}
