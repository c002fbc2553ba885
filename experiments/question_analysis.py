"""
Question and placement analysis.

Generates many questions per subject/difficulty, samples answer placement
and lets a scripted bot play full games, then plots the distributions.

Usage:
    python -m experiments.question_analysis
    python -m experiments.question_analysis --config configs/game.yaml --n-questions 5000
    python -m experiments.question_analysis --n-games 200 --output-dir results/analysis
"""

import argparse
import copy
import random
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml
import numpy as np
from tqdm import tqdm
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from quiz_snake.config import load_config, save_config
from quiz_snake.snake import Direction
from quiz_snake.questions import QuestionGenerator, Subject, Difficulty
from quiz_snake.placement import BoardPlacement
from quiz_snake.session import SessionController, GameSnapshot


OPERATORS = ["+", "-", "×", "÷"]
CAUSES = ["wall", "self", "wrong_answer", "timeout"]


def collect_question_stats(
    generator: QuestionGenerator,
    subject: Subject,
    difficulty: Difficulty,
    n: int,
) -> Dict[str, Any]:
    """
    Generates n questions and summarizes them.

    Returns:
        Dictionary with operation counts (math), word counts (vocabulary),
        correct-answer range, wrong-answer offsets and the share of
        questions with distinct answers
    """
    operations: Counter = Counter()
    words: Counter = Counter()
    correct_values: List[int] = []
    wrong_offsets: List[int] = []
    length_deltas: List[int] = []
    distinct = 0

    for _ in tqdm(range(n), desc=f"{subject.value}/{difficulty.value}", leave=False):
        question = generator.generate(subject, difficulty)
        correct = question.correct_answer.value

        if len({a.display for a in question.answers}) == len(question.answers):
            distinct += 1

        if subject == Subject.MATH:
            operations[next(op for op in OPERATORS if f" {op} " in question.prompt)] += 1
            correct_values.append(correct)
            wrong_offsets.extend(a.value - correct for a in question.wrong_answers)
        else:
            words[correct] += 1
            length_deltas.extend(len(a.value) - len(correct) for a in question.wrong_answers)

    stats: Dict[str, Any] = {
        "subject": subject.value,
        "difficulty": difficulty.value,
        "n": n,
        "distinct_rate": distinct / n if n else 0.0,
    }
    if subject == Subject.MATH:
        stats.update({
            "operations": dict(operations),
            "correct_min": int(min(correct_values)) if correct_values else None,
            "correct_max": int(max(correct_values)) if correct_values else None,
            "wrong_offsets": wrong_offsets,
        })
    else:
        stats.update({
            "words": dict(words),
            "length_deltas": length_deltas,
        })
    return stats


def placement_heatmap(
    placement: BoardPlacement,
    n: int,
    occupied: Iterable[Tuple[int, int]] = (),
) -> np.ndarray:
    """
    Places three dummy answers n times and counts cell usage.

    Returns:
        (grid_size, grid_size) array indexed [y, x]
    """
    counts = np.zeros((placement.grid_size, placement.grid_size), dtype=np.int64)
    occupied = set(occupied)
    generator = QuestionGenerator(placement.rng)

    answers = generator.generate(Subject.MATH, Difficulty.EASY).answers
    for _ in range(n):
        for item in placement.place(answers, occupied):
            counts[item.y, item.x] += 1
    return counts


class SafeRandomBot:
    """
    Scripted player: never reverses, avoids walls, its own body and wrong
    answers when it can, and heads for the correct answer half the time.
    """

    def __init__(self, rng: Optional[random.Random] = None, greed: float = 0.5):
        self.rng = rng if rng is not None else random.Random()
        self.greed = greed

    def choose(self, snapshot: GameSnapshot) -> Direction:
        hx, hy = snapshot.head
        body = set(snapshot.snake)
        wrong = {item.position for item in snapshot.items if not item.correct}
        target = next((item.position for item in snapshot.items if item.correct), None)

        candidates = [d for d in Direction if not d.is_reverse_of(snapshot.direction)]
        safe = []
        for d in candidates:
            nx, ny = hx + d.dx, hy + d.dy
            if not (0 <= nx < snapshot.grid_size and 0 <= ny < snapshot.grid_size):
                continue
            if (nx, ny) in body or (nx, ny) in wrong:
                continue
            safe.append(d)

        if not safe:
            return self.rng.choice(candidates)

        if target is not None and self.rng.random() < self.greed:
            return min(
                safe,
                key=lambda d: abs(hx + d.dx - target[0]) + abs(hy + d.dy - target[1])
            )
        return self.rng.choice(safe)


def evaluate_bot(
    config: dict,
    n_games: int = 100,
    max_ticks: int = 500,
    seed: int = 0,
) -> Dict[str, Any]:
    """
    Plays n_games with SafeRandomBot and collects results.

    Returns:
        Dictionary with score/tick statistics and game-over causes
    """
    scores: List[int] = []
    ticks: List[int] = []
    causes: List[str] = []

    for game in range(n_games):
        controller = SessionController.from_config(
            config, rng=random.Random(seed + game)
        )
        bot = SafeRandomBot(random.Random(seed + game + 1_000_003))
        snapshot = controller.start()

        cause = "timeout"
        for _ in range(max_ticks):
            controller.request_direction(bot.choose(snapshot))
            result = controller.tick()
            snapshot = controller.snapshot()
            if result.game_over:
                cause = result.reason.value
                break

        scores.append(snapshot.score)
        ticks.append(snapshot.ticks)
        causes.append(cause)
        controller.stop()

    return {
        "mean_score": float(np.mean(scores)) if scores else 0.0,
        "std_score": float(np.std(scores)) if scores else 0.0,
        "max_score": int(max(scores)) if scores else 0,
        "mean_ticks": float(np.mean(ticks)) if ticks else 0.0,
        "cause_rates": {
            c: sum(1 for x in causes if x == c) / max(n_games, 1) for c in CAUSES
        },
        "scores": scores,
        "causes": causes,
    }


def plot_analysis(results: Dict[str, Any], save_dir: Path) -> None:
    """
    Generates analysis plots.

    Args:
        results: dict returned by run_analysis
        save_dir: directory to save plots
    """
    sns.set_theme(style="whitegrid")

    # --- Figure 1: wrong answer offsets per math tier ---
    math_stats = [s for s in results["questions"] if s["subject"] == Subject.MATH.value]
    fig, axes = plt.subplots(1, max(len(math_stats), 1), figsize=(5 * max(len(math_stats), 1), 4))
    axes = np.atleast_1d(axes)
    for ax, stats in zip(axes, math_stats):
        offsets = stats["wrong_offsets"]
        ax.hist(offsets, bins=np.arange(-2.5, 3.5, 1.0), rwidth=0.8)
        ax.set_title(f"Wrong answer offsets ({stats['difficulty']})")
        ax.set_xlabel("wrong - correct")
        ax.set_ylabel("Count")
    plt.tight_layout()
    plt.savefig(save_dir / "wrong_offsets.png", dpi=150)
    plt.close()

    # --- Figure 2: placement heatmap ---
    fig, ax = plt.subplots(figsize=(7, 6))
    sns.heatmap(results["placement"], ax=ax, cmap="Greens", cbar=True)
    ax.set_title("Answer placement frequency")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    plt.tight_layout()
    plt.savefig(save_dir / "placement_heatmap.png", dpi=150)
    plt.close()

    # --- Figure 3: bot results per setting ---
    bot = results["bot"]
    labels = list(bot.keys())
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    vals = [bot[k]["mean_score"] for k in labels]
    errs = [bot[k]["std_score"] for k in labels]
    axes[0].bar(labels, vals, yerr=errs, capsize=5, color=sns.color_palette())
    axes[0].set_title("Bot mean score")
    axes[0].tick_params(axis="x", rotation=45)

    bottom = np.zeros(len(labels))
    for cause in CAUSES:
        vals = [bot[k]["cause_rates"][cause] for k in labels]
        axes[1].bar(labels, vals, bottom=bottom, label=cause)
        bottom += np.array(vals)
    axes[1].set_title("Game over causes")
    axes[1].set_ylim(0, 1)
    axes[1].legend(fontsize=8)
    axes[1].tick_params(axis="x", rotation=45)

    plt.tight_layout()
    plt.savefig(save_dir / "bot_results.png", dpi=150)
    plt.close()


def run_analysis(
    config: dict,
    n_questions: int,
    n_games: int,
    output_dir: Path,
    max_ticks: int = 500,
) -> Dict[str, Any]:
    """
    Runs the full analysis and writes summary.yaml plus figures.

    Returns:
        Dictionary with "questions", "placement" and "bot" entries
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    seed = config["game"].get("seed")
    seed = 0 if seed is None else int(seed)
    rng = random.Random(seed)

    save_config({"base_config": config, "n_questions": n_questions,
                 "n_games": n_games, "max_ticks": max_ticks},
                output_dir / "analysis_config.yaml")

    generator = QuestionGenerator(rng)
    question_stats = []
    for subject in Subject:
        for difficulty in Difficulty:
            question_stats.append(
                collect_question_stats(generator, subject, difficulty, n_questions)
            )

    grid_size = int(config["game"]["grid_size"])
    center = grid_size // 2
    heatmap = placement_heatmap(
        BoardPlacement(grid_size, rng), n_questions, occupied={(center, center)}
    )

    bot_results = {}
    for subject in Subject:
        for difficulty in Difficulty:
            label = f"{subject.value}/{difficulty.value}"
            print(f"\nBot games: {label}")
            game_config = copy.deepcopy(config)
            game_config["game"]["subject"] = subject.value
            game_config["game"]["difficulty"] = difficulty.value
            bot_results[label] = evaluate_bot(game_config, n_games, max_ticks, seed)
            ev = bot_results[label]
            print(f"  Mean Score: {ev['mean_score']:.2f} +/- {ev['std_score']:.2f}")
            print(f"  Mean Ticks: {ev['mean_ticks']:.1f}")
            print(f"  Causes:     {ev['cause_rates']}")

    results = {
        "questions": question_stats,
        "placement": heatmap,
        "bot": bot_results,
    }

    print("\nGenerating plots...")
    plot_analysis(results, output_dir)

    summary = {
        "questions": [
            {k: v for k, v in s.items() if k not in ("wrong_offsets", "length_deltas")}
            for s in question_stats
        ],
        "placement": {
            "min_count": int(heatmap.min()),
            "max_count": int(heatmap.max()),
        },
        "bot": {
            label: {k: v for k, v in ev.items() if k not in ("scores", "causes")}
            for label, ev in bot_results.items()
        },
    }
    with open(output_dir / "summary.yaml", "w") as f:
        yaml.dump(summary, f, default_flow_style=False, allow_unicode=True)

    print(f"\nAnalysis complete! Results saved to {output_dir}")
    return results


def main():
    parser = argparse.ArgumentParser(
        description="Question generation and placement analysis for Quiz Snake"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config YAML (default: built-in defaults)"
    )
    parser.add_argument(
        "--n-questions", type=int, default=2000,
        help="Questions per subject/difficulty (default: 2000)"
    )
    parser.add_argument(
        "--n-games", type=int, default=100,
        help="Bot games per subject/difficulty (default: 100)"
    )
    parser.add_argument(
        "--max-ticks", type=int, default=500,
        help="Tick limit per bot game (default: 500)"
    )
    parser.add_argument(
        "--output-dir", type=str, default=None,
        help="Output directory (default: results/analysis/<timestamp>)"
    )
    args = parser.parse_args()

    config = load_config(args.config)

    if args.output_dir:
        output_dir = Path(args.output_dir)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_dir = Path(f"results/analysis/{timestamp}")

    run_analysis(config, args.n_questions, args.n_games, output_dir, args.max_ticks)


if __name__ == "__main__":
    main()
