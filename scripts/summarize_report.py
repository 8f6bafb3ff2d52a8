#!/usr/bin/env python3
# scripts/summarize_report.py
# Aggregate a `nodeschema generate --report` CSV into per-package counts.

import argparse

import pandas as pd


def load_report(path: str) -> pd.DataFrame:
    """Load a report CSV and ensure required columns exist."""
    df = pd.read_csv(path)
    for col in ("package", "module", "status"):
        if col not in df.columns:
            raise ValueError(f"{path} is missing required column '{col}'")
    return df


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """One row per package: generated schemas, failed modules, distinct modules."""
    ok = df[df["status"] == "ok"].groupby("package").size().rename("generated")
    failed = df[df["status"] == "failed"].groupby("package").size().rename("failed")
    modules = df.groupby("package")["module"].nunique().rename("modules")
    out = pd.concat([modules, ok, failed], axis=1).fillna(0).astype(int)
    return out.reset_index().rename(columns={"index": "package"})


def main():
    ap = argparse.ArgumentParser(description="Summarize a nodeschema generation report")
    ap.add_argument("report", help="CSV written by `nodeschema generate --report`")
    ap.add_argument("--out", help="Optional CSV path for the summary table")
    args = ap.parse_args()

    df = load_report(args.report)
    table = summarize(df)
    print(table.to_string(index=False))

    failures = df[df["status"] == "failed"]
    if not failures.empty:
        print("\nFailed modules:")
        for _, row in failures.iterrows():
            print(f"- [{row['package']}] {row['module']}: {row['error']}")

    if args.out:
        table.to_csv(args.out, index=False)
        print(f"[ok] wrote {args.out}")


if __name__ == "__main__":
    main()
