#!/usr/bin/env python3
"""
Analyze replay debug logs to see how the ambient layer behaved.

Usage:
    python tools/analyze_debug_log.py <log_file_path>
"""

import re
import sys
from collections import Counter
from pathlib import Path


def parse_log_file(log_path):
    """Parse the debug log and extract ambient-layer metrics."""

    pass_reasons = Counter()
    triggered = Counter()
    probabilities = []
    ambient_passes = []
    pass_results = Counter()
    intent_changes = Counter()
    fallbacks = []
    steps = 0

    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            if 'PASS_DECISION:' in line:
                match = re.search(r'Pass: (\w+) \| Reason: (\w+) \| P: ([\d.]+)', line)
                if match:
                    should_pass, reason, probability = match.groups()
                    pass_reasons[reason] += 1
                    if should_pass == 'True':
                        triggered[reason] += 1
                        probabilities.append(float(probability))
                continue

            if 'ERROR:' in line and 'INTENT_FALLBACK' in line:
                fallbacks.append(line.strip())
                continue

            match = re.search(r'Time: ([\d.]+)s \| Event: (\w+) \| Details: (.+)$', line)
            if not match:
                continue
            time, event_type, details = match.groups()

            if event_type == 'REPLAY_STEP':
                steps += 1
            elif event_type == 'AMBIENT_PASS':
                ambient_passes.append((float(time), details))
            elif event_type == 'AMBIENT_PASS_END':
                pass_results['success' if 'success=True' in details else 'lost'] += 1
            elif event_type == 'intent':
                intent_match = re.search(r'->(\w+)', details)
                if intent_match:
                    intent_changes[intent_match.group(1)] += 1

    return {
        'steps': steps,
        'pass_reasons': pass_reasons,
        'triggered': triggered,
        'probabilities': probabilities,
        'ambient_passes': ambient_passes,
        'pass_results': pass_results,
        'intent_changes': intent_changes,
        'fallbacks': fallbacks,
    }


def analyze_pass_decisions(pass_reasons, triggered, probabilities):
    """Summarise why the pass engine did or did not trigger."""
    print("\n=== PASS DECISIONS ===")
    total = sum(pass_reasons.values())
    print(f"Evaluations: {total}")
    if not total:
        print("  ⚠️  No evaluations - ball may never be owned long enough")
        return

    for reason, count in pass_reasons.most_common():
        print(f"  {reason}: {count} ({count/total*100:.1f}%)")

    fired = sum(triggered.values())
    print(f"  Passes triggered: {fired}")
    if probabilities:
        print(f"  Average success probability: {sum(probabilities)/len(probabilities):.2f}")


def analyze_ambient_passes(ambient_passes, pass_results):
    """Summarise the overlays that actually played out."""
    print("\n=== AMBIENT PASSES ===")
    print(f"Overlays opened: {len(ambient_passes)}")
    completed = sum(pass_results.values())
    if completed:
        print(f"  Completed: {completed} (success {pass_results['success']}, lost {pass_results['lost']})")
    if len(ambient_passes) > 1:
        times = [t for t, _ in ambient_passes]
        gaps = [times[i+1] - times[i] for i in range(len(times)-1)]
        print(f"  Average gap between passes: {sum(gaps)/len(gaps):.2f}s")


def analyze_intents(intent_changes, fallbacks):
    """Summarise intent churn and classification fallbacks."""
    print("\n=== INTENTS ===")
    for intent, count in intent_changes.most_common():
        print(f"  -> {intent}: {count}")
    if fallbacks:
        print(f"  ⚠️  {len(fallbacks)} intent fallback(s):")
        for line in fallbacks[:5]:
            print(f"    {line}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python tools/analyze_debug_log.py <log_file_path>")
        print("\nExample:")
        print("  python tools/analyze_debug_log.py debug_logs/replay_debug_20251117_222236.txt")
        sys.exit(1)

    log_path = Path(sys.argv[1])

    if not log_path.exists():
        print(f"Error: Log file not found: {log_path}")
        sys.exit(1)

    print(f"Analyzing: {log_path.name}")
    print("=" * 60)

    data = parse_log_file(log_path)
    print(f"\nReplay steps applied: {data['steps']}")

    analyze_pass_decisions(data['pass_reasons'], data['triggered'], data['probabilities'])
    analyze_ambient_passes(data['ambient_passes'], data['pass_results'])
    analyze_intents(data['intent_changes'], data['fallbacks'])

    print("\n" + "=" * 60)
    print("Analysis complete!")


if __name__ == '__main__':
    main()
