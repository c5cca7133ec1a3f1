"""BDD tests for payment confirmation."""

import json

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.ordering.order.administration import UpdateOrderStatus
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.payments.payment.confirmation import ConfirmPayment
from storefront.payments.payment.payment import Payment
from storefront.shared.errors import AccessDenied

scenarios("features/payment_confirmation.feature")


@pytest.fixture()
def outcome():
    return {"exc": None}


@given("a customer placed an order", target_fixture="order_id")
def customer_placed_order(make_product, address):
    product = make_product()
    command = PlaceOrder(
        user_id="owner",
        items=json.dumps([{"product_id": str(product.id), "variant_sku": "KRT-RED-M", "quantity": 1}]),
        shipping_address=json.dumps(address),
        payment_method="JAZZCASH",
    )
    return current_domain.process(command, asynchronous=False)


@when("the owner confirms the payment")
def owner_confirms(order_id):
    current_domain.process(ConfirmPayment(user_id="owner", order_id=order_id), asynchronous=False)


@when(parsers.cfparse('staff move the order to "{status}"'))
def staff_move_order(order_id, status):
    current_domain.process(UpdateOrderStatus(order_id=order_id, order_status=status), asynchronous=False)


@when("another customer confirms the payment")
def stranger_confirms(order_id, outcome):
    try:
        current_domain.process(ConfirmPayment(user_id="stranger", order_id=order_id), asynchronous=False)
    except AccessDenied as exc:
        outcome["exc"] = exc


@then("access is denied")
def access_denied(outcome):
    assert isinstance(outcome["exc"], AccessDenied)


@then(parsers.cfparse('the payment is "{status}"'))
def payment_is(order_id, status):
    assert current_domain.repository_for(Payment).for_order(order_id).status == status


@then(parsers.cfparse('the order is "{order_status}" and "{payment_status}"'))
def order_is(order_id, order_status, payment_status):
    order = current_domain.repository_for(Order).find(order_id)
    assert (order.order_status, order.payment_status) == (order_status, payment_status)
