#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Higher Endeavors backend CLI (SQLite)

Commands:
  init                Create the schema and seed tiers, exercises, reference lifts
                      and cardio activities
  add-user            Create a user (prints the id used in the X-User-Id header)
  balance             Print the balanced-lift table for a master lift and load

Notes:
- The database location follows HE_DB_PATH / config.yaml, same as the API.
- Seeds are CSV files under ./seeds and are safe to re-run.
"""

import argparse
import csv
import os

import pandas as pd

from endeavors.db import apply_schema, get_conn, get_db_path
from endeavors.domain.structural_balance import calculate_balanced_lifts
from endeavors.logs import ensure_log_schema
from endeavors.repository import cme_repo, exercise_repo, reference_lift_repo, tier_repo, user_repo
from endeavors.services.config_svc import ensure_default_config

SEEDS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "seeds")


def _read_seed(name: str) -> list[dict]:
    with open(os.path.join(SEEDS_DIR, name), "r", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def seed_data(conn):
    for r in _read_seed("tiers.csv"):
        tier_repo.upsert(conn, int(r["tier_continuum_id"]), r["tier_continuum_name"])
    for r in _read_seed("exercises.csv"):
        exercise_repo.insert_library_exercise(
            conn, r["exercise_name"], r["muscle_group"] or None, r["equipment"] or None, r["difficulty"] or None
        )
    for r in _read_seed("reference_lifts.csv"):
        reference_lift_repo.upsert_ref_lift(
            conn, r["exercise_name"], float(r["struct_bal_ref_lift_load"]), r["struct_bal_ref_lift_note"] or None
        )
    for r in _read_seed("cme_activities.csv"):
        cme_repo.upsert_activity(conn, r["activity"], r["activity_family"] or None, r["equipment"] or None)


def cmd_init(args):
    with get_conn() as conn:
        apply_schema(conn)
        seed_data(conn)
    ensure_log_schema()
    ensure_default_config()
    print(f"Initialized {get_db_path()}")


def cmd_add_user(args):
    with get_conn() as conn:
        uid = user_repo.insert_user(conn, args.name, args.email, args.admin)
    print(uid)


def cmd_balance(args):
    with get_conn() as conn:
        lifts = [dict(r) for r in reference_lift_repo.list_ref_lifts(conn)]
    if args.master is not None:
        master = next((l for l in lifts if l["exercise_name"].lower() == args.master.lower()), None)
        if master is None:
            raise SystemExit(f"unknown reference lift: {args.master}")
        master_id = master["id"]
    else:
        master_id = args.master_id
    rows = calculate_balanced_lifts(lifts, master_id, args.load)

    df = pd.DataFrame(rows)
    if df.empty:
        print("(empty)")
        return
    df["load_factor"] = df["load_factor"].round(3)
    df["master"] = df["is_master"].map({True: "*", False: ""})
    pd.set_option("display.width", 160)
    print(df[["master", "exercise_name", "load_factor", "bal_lift_load", "bal_lift_note"]].to_string(index=False))
    if args.csv:
        df.to_csv(args.csv, index=False, encoding="utf-8")
        print(f"\nCSV exported to {args.csv}")


# ---------------- Entry ----------------

def main():
    parser = argparse.ArgumentParser(description="Higher Endeavors backend (SQLite)")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create schema and seed reference data")
    p_init.set_defaults(func=cmd_init)

    p_user = sub.add_parser("add-user", help="create a user")
    p_user.add_argument("--name", required=True)
    p_user.add_argument("--email", required=False)
    p_user.add_argument("--admin", action="store_true")
    p_user.set_defaults(func=cmd_add_user)

    p_bal = sub.add_parser("balance", help="balanced loads from a master lift")
    grp = p_bal.add_mutually_exclusive_group(required=True)
    grp.add_argument("--master", help="reference lift name, e.g. 'Back Squat'")
    grp.add_argument("--master-id", type=int)
    p_bal.add_argument("--load", required=True, type=float)
    p_bal.add_argument("--csv", required=False, help="also write the table to this CSV file")
    p_bal.set_defaults(func=cmd_balance)

    args = parser.parse_args()
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
