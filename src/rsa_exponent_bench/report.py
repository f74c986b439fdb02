from typing import List

import pandas as pd

from rsa_exponent_bench.core import BenchmarkResult

COLUMNS = ["public_exponent", "variant", "operation", "seconds"]


def results_to_frame(results: List[BenchmarkResult]) -> pd.DataFrame:
    """
    One row per (exponent, variant, operation) with the average time per operation.
    """
    rows = []
    for result in results:
        for variant, phase in (("original", result.original), ("transformed", result.transformed)):
            rows.append((result.public_exponent, variant, "encryption", phase.encrypt))
            rows.append((result.public_exponent, variant, "decryption", phase.decrypt))
    return pd.DataFrame(rows, columns=COLUMNS)


def key_timings_to_frame(results: List[BenchmarkResult]) -> pd.DataFrame:
    """Per-key timings of every result, in seconds per operation."""
    rows = [
        {
            "public_exponent": result.public_exponent,
            "key_index": timing.key_index,
            "variant": timing.variant,
            "encryption": timing.encrypt.per_operation,
            "decryption": timing.decrypt.per_operation,
        }
        for result in results
        for timing in result.key_timings
    ]
    return pd.DataFrame(rows, columns=["public_exponent", "key_index", "variant", "encryption", "decryption"])


def format_summary(results: List[BenchmarkResult]) -> str:
    """Labelled summary lines, then a variant x operation table per exponent."""
    df = results_to_frame(results)
    if df.empty:
        return "No results to report."

    lines = []
    for row in df.itertuples(index=False):
        lines.append(f"{row.variant.capitalize():<12}RSA | {row.operation.capitalize():<10} | "
                     f"e = {row.public_exponent} | {row.seconds:.9f} seconds")

    table = df.pivot_table(index=["public_exponent", "variant"], columns="operation", values="seconds")
    table = table[["encryption", "decryption"]]

    lines.append("")
    lines.append(table.to_string(float_format="{:.9f}".format))
    return "\n".join(lines)


def print_summary_report(results: List[BenchmarkResult]) -> None:
    """Prints the summary of a benchmark campaign."""
    print("\n" + "=" * 80)
    print("RSA EXPONENT BENCHMARK SUMMARY")
    print("=" * 80)
    for result in results:
        print(f"  - e = {result.public_exponent}: {result.num_keys} keys of {result.key_length} bits, "
              f"{result.ops_per_key} operations per key")
    print("-" * 80)
    print(format_summary(results))
    print("-" * 80)
