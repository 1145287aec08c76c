from __future__ import annotations

import argparse
import csv
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

EventList = List[Tuple[float, str]]


def load_events(path: Path, names: Optional[Iterable[str]] = None) -> EventList:
    """Read (t, event) pairs from an events CSV, optionally keeping only some names."""
    keep = set(names) if names else None
    events = []
    with open(path, newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        fields = reader.fieldnames or []
        if 'event' not in fields:
            raise ValueError(f'{path}: missing "event" column')
        t_key = 't_sec' if 't_sec' in fields else 't'
        for row in reader:
            if keep is None or row['event'] in keep:
                events.append((float(row[t_key]), row['event']))
    return events


class EventScore(NamedTuple):
    tp: int
    fp: int
    fn: int
    precision: float
    recall: float
    f1: float

    @classmethod
    def from_counts(cls, tp: int, fp: int, fn: int) -> "EventScore":
        prec = tp / (tp + fp) if tp + fp else 0.0
        rec = tp / (tp + fn) if tp + fn else 0.0
        f1 = 2 * prec * rec / (prec + rec) if prec + rec else 0.0
        return cls(tp, fp, fn, prec, rec, f1)


def _nearest(t: float, name: str, gt: EventList, used: List[bool], tol: float) -> Optional[int]:
    """Index of the closest unused ground-truth event of the same name within tol."""
    candidates = [(abs(t - t_gt), i) for i, (t_gt, n_gt) in enumerate(gt)
                  if not used[i] and n_gt == name and abs(t - t_gt) <= tol]
    return min(candidates)[1] if candidates else None


def evaluate(pred: EventList, gt: EventList, tol: float = 0.6) -> Dict[str, EventScore]:
    """Greedy one-to-one matching of predictions to ground truth within ``tol`` seconds."""
    used = [False] * len(gt)
    tp: Counter = Counter()
    fp: Counter = Counter()
    for t_pred, name in pred:
        idx = _nearest(t_pred, name, gt, used, tol)
        if idx is None:
            fp[name] += 1
        else:
            used[idx] = True
            tp[name] += 1
    fn = Counter(name for (_, name), hit in zip(gt, used) if not hit)
    names = dict.fromkeys([n for _, n in pred] + [n for _, n in gt])
    return {n: EventScore.from_counts(tp[n], fp[n], fn[n]) for n in names}


def main(argv=None):
    ap = argparse.ArgumentParser(description='Evaluate workflow events against ground truth.')
    ap.add_argument('pred', type=Path, help='Predicted events.csv')
    ap.add_argument('gt', type=Path, help='Ground truth events_gt.csv')
    ap.add_argument('--tol', type=float, default=0.6, help='Time tolerance in seconds')
    ap.add_argument('--only', nargs='*', default=['confirmed'],
                    help='Event names to score (default: confirmed); pass none to score all')
    args = ap.parse_args(argv)

    pred = load_events(args.pred, args.only)
    gt = load_events(args.gt, args.only)
    metrics = evaluate(pred, gt, args.tol)
    for name, s in metrics.items():
        print(f"{name}: TP={s.tp} FP={s.fp} FN={s.fn} Precision={s.precision:.3f} Recall={s.recall:.3f} F1={s.f1:.3f}")


if __name__ == '__main__':
    main()
