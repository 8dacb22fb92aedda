import pandas as pd
import numpy as np
import os
import argparse
from datetime import date, timedelta
from typing import Dict, List

COUNTRIES = ["Germany", "United States", "Australia", "United Kingdom", "Canada", "France"]
PRODUCT_LINES = ["M", "R", "S", "T"]
CATEGORIES = {
    "AC": ("Accessories", ["Helmets", "Locks", "Lights"]),
    "BI": ("Bikes", ["Road Bikes", "Mountain Bikes", "Touring Bikes"]),
    "CL": ("Clothing", ["Jerseys", "Caps", "Gloves"]),
    "CO": ("Components", ["Chains", "Wheels", "Saddles"]),
}


def _random_date(rng: np.random.Generator, start: date, days: int) -> date:
    return start + timedelta(days=int(rng.integers(0, days)))


def generate_crm_customers(rng: np.random.Generator, num_customers: int) -> pd.DataFrame:
    ids = np.arange(11000, 11000 + num_customers)
    return pd.DataFrame({
        "cst_id": ids,
        "cst_key": [f"AW{i:08d}" for i in ids],
        "cst_firstname": rng.choice(["Jon", "Elizabeth", "Ruben", "Christy", "Lauren"], num_customers),
        "cst_lastname": rng.choice(["Yang", "Johnson", "Torres", "Zhu", "Walker"], num_customers),
        "cst_marital_status": rng.choice(["M", "S", ""], num_customers),
        "cst_gndr": rng.choice(["M", "F", ""], num_customers),
        "cst_create_date": [_random_date(rng, date(2025, 10, 1), 120).isoformat() for _ in ids],
    })


def generate_crm_products(rng: np.random.Generator, num_products: int) -> pd.DataFrame:
    records = []
    codes = list(CATEGORIES)
    for i in range(num_products):
        cat = codes[i % len(codes)]
        start = _random_date(rng, date(2011, 7, 1), 1000)
        records.append({
            "prd_id": 210 + i,
            "prd_key": f"{cat}-{cat[0]}{i:02d}-P{i:04d}",
            "prd_nm": f"Product {i}",
            "prd_cost": int(rng.integers(1, 2000)),
            "prd_line": rng.choice(PRODUCT_LINES),
            "prd_start_dt": start.isoformat(),
            "prd_end_dt": "" if i % 3 else (start + timedelta(days=365)).isoformat(),
        })
    return pd.DataFrame(records)


def generate_crm_sales(rng: np.random.Generator, customers: pd.DataFrame,
                       products: pd.DataFrame, num_orders: int) -> pd.DataFrame:
    records = []
    for i in range(num_orders):
        order_date = _random_date(rng, date(2010, 12, 29), 1500)
        quantity = int(rng.integers(1, 4))
        price = int(rng.integers(2, 3600))
        records.append({
            "sls_ord_num": f"SO{43697 + i}",
            "sls_prd_key": products["prd_key"].iloc[int(rng.integers(0, len(products)))].split("-", 1)[1],
            "sls_cust_id": int(rng.choice(customers["cst_id"])),
            # YYYYMMDD integers, as exported by the CRM
            "sls_order_dt": int(order_date.strftime("%Y%m%d")),
            "sls_ship_dt": int((order_date + timedelta(days=7)).strftime("%Y%m%d")),
            "sls_due_dt": int((order_date + timedelta(days=12)).strftime("%Y%m%d")),
            "sls_sales": quantity * price,
            "sls_quantity": quantity,
            "sls_price": price,
        })
    return pd.DataFrame(records)


def generate_erp_customers(rng: np.random.Generator, customers: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame({
        "CID": ["NAS" + key for key in customers["cst_key"]],
        "BDATE": [_random_date(rng, date(1940, 1, 1), 25000).isoformat() for _ in range(len(customers))],
        "GEN": rng.choice(["Male", "Female", ""], len(customers)),
    })


def generate_erp_locations(rng: np.random.Generator, customers: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame({
        "CID": [f"{key[:2]}-{key[2:]}" for key in customers["cst_key"]],
        "CNTRY": rng.choice(COUNTRIES, len(customers)),
    })


def generate_erp_categories() -> pd.DataFrame:
    records = []
    for code, (category, subcategories) in CATEGORIES.items():
        for sub in subcategories:
            records.append({
                "ID": f"{code}_{sub[:2].upper()}",
                "CAT": category,
                "SUBCAT": sub,
                "MAINTENANCE": "Yes" if code in ("BI", "CO") else "No",
            })
    return pd.DataFrame(records)


def generate_sources(output_dir: str, num_customers: int = 1000, num_products: int = 50,
                     num_orders: int = 5000, seed: int = 42) -> Dict[str, str]:
    """
    Write the six CRM and ERP extracts under output_dir.

    Returns:
        Mapping of file name to written path
    """
    rng = np.random.default_rng(seed)
    customers = generate_crm_customers(rng, num_customers)
    products = generate_crm_products(rng, num_products)

    frames = {
        ("source_crm", "cust_info.csv"): customers,
        ("source_crm", "prd_info.csv"): products,
        ("source_crm", "sales_details.csv"): generate_crm_sales(rng, customers, products, num_orders),
        ("source_erp", "cust_az12.csv"): generate_erp_customers(rng, customers),
        ("source_erp", "loc_a101.csv"): generate_erp_locations(rng, customers),
        ("source_erp", "px_cat_g1v2.csv"): generate_erp_categories(),
    }

    written = {}
    for (system_dir, filename), df in frames.items():
        directory = os.path.join(output_dir, system_dir)
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, filename)
        df.to_csv(path, index=False)
        written[filename] = path
    return written


def main(argv: List[str] = None) -> None:
    parser = argparse.ArgumentParser(description='Generate sample CRM and ERP extracts')
    parser.add_argument('--output-dir', type=str, default=os.path.join("datasets"),
                        help='Output directory (default: datasets)')
    parser.add_argument('--customers', type=int, default=1000, help='Number of customers')
    parser.add_argument('--products', type=int, default=50, help='Number of products')
    parser.add_argument('--orders', type=int, default=5000, help='Number of sales lines')
    parser.add_argument('--seed', type=int, default=42, help='Random seed')
    args = parser.parse_args(argv)

    written = generate_sources(args.output_dir, args.customers, args.products, args.orders, args.seed)
    for path in written.values():
        print(f"Generated CSV file at: {path}")


if __name__ == "__main__":
    main()
