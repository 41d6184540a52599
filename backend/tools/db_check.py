import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "fast_id_badges.db"
BARCODE_DB = sys.argv[2] if len(sys.argv) > 2 else "barcode_entries.db"
ORDER_REF = sys.argv[3] if len(sys.argv) > 3 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Recent Orders ===")
if ORDER_REF:
    cur.execute(
        'SELECT id, "orderId", "userId", email, subtotal, tax, shipping, total, status, "orderDate" FROM orders WHERE "orderId"=?',
        (ORDER_REF,),
    )
else:
    cur.execute(
        'SELECT id, "orderId", "userId", email, subtotal, tax, shipping, total, status, "orderDate" FROM orders ORDER BY "orderDate" DESC LIMIT 20'
    )
orders = cur.fetchall()
for r in orders:
    print(r)

print("\n=== Order Items ===")
for r in orders:
    cur.execute(
        "SELECT id, product_id, name, price, quantity, badge_type, size FROM order_items WHERE order_id=?",
        (r[0],),
    )
    for item in cur.fetchall():
        print(r[1], item)

print("\n=== Orphaned Order Items ===")
cur.execute(
    "SELECT oi.id, oi.order_id FROM order_items oi LEFT JOIN orders o ON o.id = oi.order_id WHERE o.id IS NULL"
)
print(cur.fetchall() or "none")

conn.close()

print("\n=== Recent Barcode Entries ===")
bconn = sqlite3.connect(BARCODE_DB)
bcur = bconn.cursor()
bcur.execute("SELECT id, barcode, timestamp, action FROM barcode_entries ORDER BY timestamp DESC LIMIT 20")
for r in bcur.fetchall():
    print(r)
bconn.close()
