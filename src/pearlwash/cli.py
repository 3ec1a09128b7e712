from __future__ import annotations

from .context import AppContext
from .domain import InvalidInput, Order
from .lifecycle import STATUS_FLOW, STATUS_LABELS, timeline
from .reports import DATE_RANGES
from .services.booking_service import BookingRequest, CustomerInfo, ValidationError
from .store import RecordNotFound

_STEP_MARKS = {"completed": "[x]", "current": "[>]", "upcoming": "[ ]"}


def _prompt(msg: str) -> str:
    return input(msg).strip()


def _print_order(o: Order) -> None:
    print(
        f"order#{o.id} {o.status} customer={o.customer_name} phone={o.customer_phone} "
        f"pickup={o.pickup_date.isoformat()} {o.pickup_time} total={o.total_price:.2f}"
    )


def print_order_details(o: Order) -> None:
    _print_order(o)
    print(f"  address: {o.address}")
    for item in o.services:
        print(f"  - {item.service_name} x{item.quantity} @ {item.price:.2f} = {item.extended_price:.2f}")
    for step in timeline(o.status):
        print(f"  {_STEP_MARKS[step.state]} {step.label}: {step.description}")


def run_cli(ctx: AppContext) -> None:
    while True:
        print("\n=== PearlWash CLI ===")
        print("1) List services")
        print("2) Book an order")
        print("3) Track an order")
        print("4) Admin dashboard")
        print("5) Update order status")
        print("6) Customer details")
        print("0) Exit")

        choice = _prompt("> ")
        try:
            if choice == "0":
                return

            elif choice == "1":
                for s in ctx.service_repo.list():
                    print(f"#{s.id} {s.name} price={s.price:.2f} duration={s.duration}")

            elif choice == "2":
                name = _prompt("name: ")
                phone = _prompt("phone: ")
                address = _prompt("address: ")
                ids_in = _prompt("service ids (comma separated): ")
                service_ids = [int(x) for x in ids_in.replace(" ", "").split(",") if x]
                pickup_date = _prompt("pickup date (YYYY-MM-DD): ")
                print("time slots: " + ", ".join(ctx.booking.time_slots))
                pickup_time = _prompt("pickup time: ")

                order = ctx.booking.submit(
                    BookingRequest(
                        customer=CustomerInfo(name=name, phone=phone, address=address),
                        service_ids=service_ids,
                        pickup_date=pickup_date,
                        pickup_time=pickup_time,
                    )
                )
                print(f"Booking confirmed! order_id={order.id} total={order.total_price:.2f}")

            elif choice == "3":
                order = ctx.tracking.track(_prompt("order id: "))
                print_order_details(order)

            elif choice == "4":
                status = _prompt(f"status (all/{'/'.join(STATUS_FLOW)}) [all]: ") or "all"
                date_range = _prompt(f"date range ({'/'.join(DATE_RANGES)}) [all]: ") or "all"
                view = ctx.orders.dashboard(status=status, date_range=date_range)
                m = view.metrics
                print(f"total={m.total} pending={m.pending} in_progress={m.in_progress} completed={m.completed}")
                for o in view.orders:
                    _print_order(o)
                print(f"{len(view.orders)} order(s) shown")

            elif choice == "5":
                order_id = int(_prompt("order_id: "))
                for i, s in enumerate(STATUS_FLOW, start=1):
                    print(f"  {i}) {STATUS_LABELS[s]}")
                picked = _prompt("new status (number or name): ")
                status = STATUS_FLOW[int(picked) - 1] if picked.isdigit() and 0 < int(picked) <= len(STATUS_FLOW) else picked
                order = ctx.orders.update_status(order_id, status)
                print(f"Order #{order.id} is now {order.status}")

            elif choice == "6":
                summary = ctx.orders.customer_details(_prompt("customer name: "))
                print(
                    f"{summary.customer_name}: orders={summary.order_count} "
                    f"spent={summary.total_spent:.2f}"
                )
                if summary.most_recent_order:
                    print(f"most recent pickup: {summary.most_recent_order.pickup_date.isoformat()}")
                for o in summary.orders:
                    _print_order(o)

            else:
                print("Unknown choice.")

        except ValidationError as e:
            for field, message in e.errors.items():
                print(f"[INPUT ERROR] {field}: {message}")
        except InvalidInput as e:
            print(f"[INPUT ERROR] {e}")
        except RecordNotFound:
            print("[NOT FOUND] Order not found. Please check your order ID.")
        except ValueError as e:
            print(f"[VALUE ERROR] {e}")
