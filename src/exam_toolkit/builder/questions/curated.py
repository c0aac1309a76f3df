"""
Module: builder.questions.curated

Purpose:
    Hand-authored question handlers for objectives where raw bullet text
    makes poor questions. Each handler is registered for one
    (exam, objective id) pair and is independently testable.

Handlers:
    - 220-1201 2.1: port -> protocol
    - 220-1201 3.4: RAID levels with striping and fault tolerance (multi)
    - 220-1202 1.3: Windows utility -> task
    - 220-1202 1.4: command -> purpose
    - 220-1202 2.4: malware taxonomy
    - 220-1202 4.3: 3-2-1 backup rule
"""

from __future__ import annotations

from typing import List, Tuple

from exam_toolkit.common.objectives import ResolvedObjective
from exam_toolkit.core.models.questions import Question

from .context import QuestionContext
from .options import make_multi, make_single, unique
from .registry import curated

CORE1 = "220-1201"
CORE2 = "220-1202"

PORT_SEPARATOR = "–"  # en dash, as in "443 – HTTPS"

DEFAULT_PORT_BULLETS = ("22 – SSH", "53 – DNS", "80 – HTTP", "443 – HTTPS")

WINDOWS_UTILITIES: Tuple[Tuple[str, str], ...] = (
    ("Event Viewer", "review system/application logs and errors"),
    ("Disk Management", "create/extend partitions and manage volumes"),
    ("Device Manager", "view device status and manage drivers"),
    ("Services", "start/stop and configure background services"),
    ("Task Manager", "view processes and performance / end tasks"),
)

COMMANDS: Tuple[Tuple[str, str], ...] = (
    ("ipconfig", "view IP configuration"),
    ("tracert", "trace route to a host"),
    ("sfc", "check/repair system files"),
    ("chkdsk", "check disk integrity and filesystem errors"),
    ("netstat", "view active connections and listening ports"),
)

DEFAULT_MALWARE_TYPES = ("Ransomware", "Trojan", "Rootkit", "Spyware")


def _split_port(bullet: str) -> Tuple[str, str]:
    port, _, protocol = bullet.partition(PORT_SEPARATOR)
    return port.strip(), protocol.strip()


def _pick_with_wrong(ctx: QuestionContext, table: Tuple[Tuple[str, str], ...]) -> Tuple[Tuple[str, str], List[str]]:
    """Pick one (name, description) row and up to three other names."""
    pick = ctx.rng.pick_one(table)
    others = [row for row in table if row[0] != pick[0]]
    wrong = [name for name, _ in ctx.rng.shuffle(others)[:3]]
    return pick, wrong


@curated(CORE1, "2.1")
def port_to_protocol(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    port_bullets = unique([
        b for b in objective.bullets
        if b[:1].isdigit() and all(_split_port(b))
    ]) or list(DEFAULT_PORT_BULLETS)
    pick = ctx.rng.pick_one(port_bullets)
    port, protocol = _split_port(pick)
    wrong = [_split_port(b)[0] for b in ctx.rng.shuffle([b for b in port_bullets if b != pick])[:3]]
    return make_single(
        ctx, question_id, objective,
        prompt=f"Which port is associated with {protocol}?",
        correct_text=port,
        distractors=wrong,
        explanation=f"{protocol} commonly uses port {port}.",
        focus=pick,
    )


@curated(CORE1, "3.4")
def raid_striping_with_redundancy(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    return make_multi(
        ctx, question_id, objective,
        prompt="Which TWO RAID levels use striping AND provide fault tolerance?",
        correct_texts=["RAID 5", "RAID 10"],
        distractors=["RAID 0", "RAID 1"],
        explanation=(
            "RAID 5 stripes data with distributed parity and RAID 10 stripes across "
            "mirrored pairs. RAID 0 stripes without redundancy; RAID 1 mirrors without striping."
        ),
        focus="RAID 0/1/5/10",
    )


@curated(CORE2, "1.3")
def windows_utility_for_task(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    (tool, task), wrong = _pick_with_wrong(ctx, WINDOWS_UTILITIES)
    return make_single(
        ctx, question_id, objective,
        prompt=f"Which Windows utility is MOST appropriate to {task}?",
        correct_text=tool,
        distractors=wrong,
        explanation=f"{tool} is used to {task}.",
        focus=tool,
    )


@curated(CORE2, "1.4")
def command_for_purpose(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    (command, purpose), wrong = _pick_with_wrong(ctx, COMMANDS)
    return make_single(
        ctx, question_id, objective,
        prompt=f"Which command is MOST appropriate to {purpose}?",
        correct_text=command,
        distractors=wrong,
        explanation=f"{command} is used to {purpose}.",
        focus=command,
    )


@curated(CORE2, "2.4")
def malware_type(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    types = unique([b.strip() for b in objective.bullets]) or list(DEFAULT_MALWARE_TYPES)
    correct = ctx.rng.pick_one(types)
    wrong = ctx.rng.shuffle([t for t in types if t != correct])[:3]
    return make_single(
        ctx, question_id, objective,
        prompt=f'Which malware type BEST matches the term "{correct}"?',
        correct_text=correct,
        distractors=wrong,
        explanation="Know malware categories and typical indicators/removal approaches.",
        focus=correct,
    )


@curated(CORE2, "4.3")
def backup_rule(ctx: QuestionContext, objective: ResolvedObjective, question_id: str) -> Question:
    return make_single(
        ctx, question_id, objective,
        prompt=(
            "Which concept is BEST associated with maintaining three copies of data "
            "on two media types with one offsite copy?"
        ),
        correct_text="3-2-1 rule",
        distractors=["1-1-1 rule", "RAID 0", "WEP"],
        explanation="The 3-2-1 rule: 3 copies, 2 different media types, 1 offsite.",
        focus="3-2-1",
    )
