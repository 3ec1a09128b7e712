from decimal import Decimal

SERVICES = [
    {"id": 1, "name": "Wash & Fold", "description": "Washed and folded", "duration": "24 hours",
     "price": Decimal("15.00"), "icon": "🧺"},
    {"id": 2, "name": "Dry Cleaning", "description": "Delicates", "duration": "48 hours",
     "price": Decimal("25.00"), "icon": "👔"},
    {"id": 3, "name": "Ironing", "description": "Pressed", "duration": "24 hours",
     "price": Decimal("10.00"), "icon": "♨️"},
]


def make_order(order_id, *, status="scheduled", name="Jane Doe", pickup="2024-01-01",
               total="30.00", created="2024-01-01T08:00:00.000Z"):
    return {
        "id": order_id,
        "customerName": name,
        "customerPhone": "+1 555 010 2000",
        "address": "12 Harbor Street",
        "services": [
            {"serviceId": 1, "serviceName": "Wash & Fold", "quantity": 2, "price": Decimal("15.00")},
        ],
        "pickupDate": pickup,
        "pickupTime": "9:00 AM",
        "status": status,
        "totalPrice": Decimal(total),
        "createdAt": created,
    }
