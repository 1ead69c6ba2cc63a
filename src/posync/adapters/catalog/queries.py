"""Graph documents sent to the catalog.

The catalog's filter inputs are not exposed as variables, so values are
rendered into the document. Strings always go through ``json.dumps`` and ids
through ``_id_literal`` so no raw input ends up in query text.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from posync.domain.model import EntityId

ACTION_MUTATION = "mutation { action(id: $action_id input: $input )} "

_PAGE_SIZE = 200


def _id_literal(value: EntityId) -> str:
    if isinstance(value, bool):
        raise TypeError("Boolean is not a valid identifier")
    if isinstance(value, int):
        return str(value)
    text = str(value).strip()
    if text.isdigit():
        return text
    return json.dumps(text)


def _string_literal(value: str) -> str:
    return json.dumps(value)


def purchase_order_lookup(order_number: str, *, shipper_id: int, customer_id: int) -> str:
    return f"""{{
  allPurchaseOrder(
    where: {{
      _and: [
        {{ orderNumbers: {{ eq: {_string_literal(order_number)} }} }},
        {{ bookings: {{ shipper: {{ id: {{ eq: {_id_literal(shipper_id)} }} }} }} }},
        {{ bookings: {{ customer: {{ id: {{ eq: {_id_literal(customer_id)} }} }} }} }}
      ]
    }}
    take: {_PAGE_SIZE}
    skip: 0
  ) {{
    results {{
      id
      orderNumbers
      styleNumbers {{
        id
        styleNumber
      }}
    }}
    totalCount
  }}
}}"""


def style_number_lookup(style_number: str, *, order_number: str, shipment_id: EntityId) -> str:
    return f"""{{
  allStyleNumber(
    where: {{
      _and: [
        {{ styleNumber: {{ eq: {_string_literal(style_number)} }} }},
        {{ pos: {{ orderNumbers: {{ eq: {_string_literal(order_number)} }} }} }},
        {{ shipments: {{ id: {{ eq: {_id_literal(shipment_id)} }} }} }}
      ]
    }}
    take: {_PAGE_SIZE}
    skip: 0
  ) {{
    results {{
      id
      styleNumber
    }}
    totalCount
  }}
}}"""


def shipment_detail(shipment_id: EntityId) -> str:
    return f"""{{
  allShipments(where: {{ id: {{ eq: {_id_literal(shipment_id)} }} }}) {{
    results {{
      id
      purchaseOrders {{
        id
        orderNumbers
        styleNumbers {{
          id
          styleNumber
        }}
      }}
      styleNumbersRelation {{
        id
      }}
      companyRelation {{
        id
      }}
    }}
    totalCount
  }}
}}"""


def booking_detail(booking_id: EntityId) -> str:
    return f"""{{
  allBooking(where: {{ id: {{ eq: {_id_literal(booking_id)} }} }}) {{
    results {{
      id
      styleNumberRelation {{
        id
        styleNumber
        pos {{
          id
          orderNumbers
        }}
      }}
      customer {{
        id
      }}
      pos {{
        id
        orderNumbers
        styleNumbers {{
          id
          styleNumber
        }}
      }}
    }}
    totalCount
  }}
}}"""


def purchase_order_search(text: str, *, purchaser_id: EntityId, exact: bool = False) -> str:
    operator = "eq" if exact else "matches"
    return f"""{{
  allPurchaseOrder(where: {{
    orderNumbers: {{ {operator}: {_string_literal(text)} }},
    orderPurchaser: {{ id: {{ eq: {_id_literal(purchaser_id)} }} }}
  }}) {{
    results {{
      id
      orderNumbers
      styleNumbers {{
        id
        styleNumber
      }}
    }}
    totalCount
  }}
}}"""


def style_number_search(text: str, *, company_id: EntityId) -> str:
    return f"""{{
  allStyleNumber(where: {{
    styleNumber: {{ matches: {_string_literal(text)} }},
    company: {{ id: {{ eq: {_id_literal(company_id)} }} }}
  }}) {{
    results {{
      id
      styleNumber
    }}
    totalCount
  }}
}}"""


def style_numbers_for_purchase_order(purchase_order_id: EntityId) -> str:
    return f"""{{
  allStyleNumber(where: {{ pos: {{ id: {{ eq: {_id_literal(purchase_order_id)} }} }} }}) {{
    results {{
      id
      styleNumber
    }}
    totalCount
  }}
}}"""
