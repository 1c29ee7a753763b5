# backend/portfolio_reporting/cli/__main__.py
from __future__ import annotations

import argparse

from portfolio_reporting.cli.seed_demo import seed_demo


def main() -> None:
    p = argparse.ArgumentParser(prog="python -m portfolio_reporting.cli")
    p.add_argument("--months", type=int, default=6, help="months of rent/mortgage ledger to generate")
    args = p.parse_args()

    out = seed_demo(months=args.months)
    print(
        {
            "ok": True,
            "properties": out.properties,
            "transactions": out.transactions,
            "months": out.months,
        }
    )


if __name__ == "__main__":
    main()
