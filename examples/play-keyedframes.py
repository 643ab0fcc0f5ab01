import pyarrow as pa

from keyedframes import KeyedFrame, left_join, semi_join

orders = KeyedFrame(
    pa.table(
        {
            "Shop": ["Rome 1", "Rome 1", "Milan 4", "Turin 2", "Milan 4"],
            "Day": [1, 2, 1, 1, 1],
            "Quantity": [8, 3, 7, 1, 7],
        }
    ),
    ["Shop", "Day"],
)
shops = KeyedFrame.from_pydict(
    {"Shop": ["Milan 4", "Rome 1"], "City": ["Milan", "Rome"]}, "Shop"
)

print(orders.unique().sort())
print(left_join(orders, shops))
print(semi_join(orders, shops).key)
