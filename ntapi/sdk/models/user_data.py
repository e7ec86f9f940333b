"""Typed account snapshot returned by ``getOPQ``.

Architecture:
    The snapshot ("OPQ") aggregates quotes, portfolio, balances, orders, the
    market calendar, the user profile and user preferences. Most numeric
    leaves are declared with the lenient aliases from ``fields`` because
    their wire types drift between releases. ``decode_user_data`` is the
    single entry point and turns pydantic's validation failure into a
    ``DecodeError`` that names the dotted path of the offending field.

Design Decisions:
    - Frozen models, as everywhere else in the library
    - Wire names are kept as aliases; attributes are snake_case and
      ``populate_by_name`` allows constructing models either way
    - Unknown keys are ignored so additive upstream changes never break
      the decode
    - Sub-records whose shape is not pinned down (``sess``, ``orders.order``,
      ``offbalance.pos``) stay as raw JSON values
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.exceptions import DecodeError
from .fields import (
    LenientFloat,
    LenientInt,
    LenientStr,
    OptionalFloat,
    OptionalInt,
    OptionalStr,
    merge_named_lists,
)


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Quote(_Model):
    """Quote row as embedded in the snapshot."""

    acd: OptionalFloat = None
    baf: OptionalInt = None
    bap: OptionalFloat = None
    bas: OptionalFloat = None
    base_contract_code: OptionalStr = None
    base_currency: OptionalStr = None
    base_ltr: OptionalStr = None
    bbf: OptionalInt = None
    bbp: OptionalFloat = None
    bbs: OptionalFloat = None
    c: str | None = None
    chg: OptionalFloat = None
    chg110: OptionalFloat = None
    chg22: OptionalFloat = None
    chg220: OptionalFloat = None
    chg5: OptionalFloat = None
    close_price: OptionalFloat = Field(default=None, alias="ClosePrice")
    codesub_nm: str | None = None
    cpn: OptionalFloat = None
    cpp: OptionalInt = None
    dpb: OptionalInt = None
    dps: OptionalInt = None
    emitent_type: str | None = None
    fv: OptionalFloat = None
    init: OptionalInt = None
    ipo: Any = None
    issue_nb: str | None = None
    kind: OptionalInt = None
    ltp: OptionalFloat = None
    ltr: str | None = None
    lts: OptionalFloat = None
    ltt: str | None = None
    market_status: str | None = Field(default=None, alias="marketStatus")
    maxtp: OptionalFloat = None
    min_step: OptionalFloat = None
    mintp: OptionalFloat = None
    mrg: str | None = None
    mtd: str | None = None
    n: OptionalInt = None
    name: str | None = None
    name2: str | None = None
    ncd: str | None = None
    ncp: OptionalInt = None
    op: OptionalFloat = None
    option_type: str | None = None
    otc_instr: str | None = None
    p110: OptionalFloat = None
    p22: OptionalFloat = None
    p220: OptionalFloat = None
    p5: OptionalFloat = None
    pcp: OptionalFloat = None
    pp: OptionalFloat = None
    quote_basis: str | None = None
    rev: OptionalInt = None
    scheme_calc: str | None = None
    step_price: OptionalFloat = None
    strike_price: OptionalInt = None
    trades: OptionalInt = None
    trading_reference_price: OptionalFloat = Field(default=None, alias="TradingReferencePrice")
    trading_session_sub_id: str | None = Field(default=None, alias="TradingSessionSubID")
    quote_type: OptionalInt = Field(default=None, alias="type")
    utc_offset: OptionalInt = Field(default=None, alias="UTCOffset")
    virt_base_instr: str | None = None
    vlt: OptionalFloat = None
    vol: OptionalFloat = None
    x_agg_futures: str | None = None
    x_curr: str | None = None
    x_curr_val: OptionalFloat = Field(default=None, alias="x_currVal")
    x_descr: str | None = None
    x_dsc1: OptionalInt = None
    x_dsc1_reception: str | None = None
    x_dsc2: OptionalInt = None
    x_dsc3: OptionalInt = None
    x_istrade: OptionalInt = None
    x_lot: OptionalFloat = None
    x_max: OptionalFloat = None
    x_min: OptionalFloat = None
    x_min_lot_q: OptionalStr = None
    x_short: OptionalInt = None
    x_short_reception: str | None = None
    yld: OptionalFloat = None
    yld_ytm_ask: OptionalInt = None
    yld_ytm_bid: OptionalInt = None


class Quotes(_Model):
    q: list[Quote] = Field(default_factory=list)


class PortfolioAccount(_Model):
    """Cash balance in one currency."""

    curr: str
    currval: LenientFloat
    forecast_in: LenientFloat
    forecast_out: LenientFloat
    t2_in: LenientFloat
    t2_out: LenientFloat
    s: LenientFloat


class PortfolioPosition(_Model):
    """Open position."""

    open_bal: LenientFloat
    mkt_price: LenientFloat
    name: str
    i: str
    t: LenientInt
    scheme_calc: str
    instr_id: OptionalInt = None
    yield_value: LenientInt = Field(alias="Yield")
    issue_nb: str
    profit_price: LenientFloat
    acc_pos_id: LenientInt
    accruedint_a: LenientFloat
    acd: LenientFloat
    k: LenientInt
    bal_price_a: LenientFloat
    price_a: LenientFloat
    base_currency: str
    face_val_a: LenientFloat
    curr: str
    go: LenientInt
    profit_close: LenientFloat
    fv: LenientInt
    vm: LenientInt
    q: LenientInt
    name2: str
    market_value: LenientFloat
    close_price: LenientFloat
    currval: LenientFloat
    s: LenientFloat


class PortfolioSummary(_Model):
    loaded: bool
    acc: list[PortfolioAccount] = Field(default_factory=list)
    pos: list[PortfolioPosition] = Field(default_factory=list)


class Orders(_Model):
    loaded: bool
    order: list[Any] = Field(default_factory=list)


class MarketDate(_Model):
    """Calendar exception (holiday or shortened session)."""

    from_: LenientStr = Field(alias="from")
    to: LenientStr
    dayoff: LenientInt
    desc: str


class MarketEvent(_Model):
    id: str
    t: str
    next: str


class Market(_Model):
    """Trading calendar entry for one market."""

    n: str
    n2: str
    s: str
    o: str
    c: str
    dt: LenientInt
    p: OptionalStr = None
    post: OptionalStr = None
    date: list[MarketDate] | None = None
    ev: list[MarketEvent] | None = None


class Markets(_Model):
    t: str
    m: list[Market] = Field(default_factory=list)


class MarketsWrapper(_Model):
    markets: Markets


class Offbalance(_Model):
    net_assets: LenientInt
    pos: list[Any] = Field(default_factory=list)
    acc: list[Any] = Field(default_factory=list)


class UserStockLists(_Model):
    """Named watchlists; ``default`` is the one every account has."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    default: list[str] = Field(default_factory=list)


class UserLists(_Model):
    user_stock_lists: UserStockLists = Field(
        default_factory=UserStockLists, alias="userStockLists"
    )
    user_stock_list_selected: str = Field(alias="userStockListSelected")
    stocks_array: list[str] = Field(alias="stocksArray")

    @field_validator("user_stock_lists", mode="before")
    @classmethod
    def normalize_stock_lists(cls, v: Any) -> Any:
        """Accept a map, a list of single-entry maps, or a flat symbol list."""
        return merge_named_lists(v)


class PushSettings(_Model):
    android_tn: str


class FfinbankAccount(_Model):
    number: str = Field(alias="Number")
    passport: str = Field(alias="Passport")


class FfinbankResponse(_Model):
    accounts: list[FfinbankAccount] = Field(alias="Accounts")


class FfinbankRequisites(_Model):
    date_mod: str
    response: FfinbankResponse


class UserInfoDetails(_Model):
    iis: str | None = None
    push: PushSettings | None = None
    comment: str | None = None
    smev_sms: OptionalStr = None
    statuses: dict[str, str] | None = None
    mkt_codes: dict[str, str] | None = None
    telegram_id: OptionalStr = None
    telegram_bot: bool | None = None
    date_register: str | None = Field(default=None, alias="Date register")
    is_lead_account: bool | None = Field(default=None, alias="isLeadAccount")
    date_open_real: str | None = Field(default=None, alias="Date open real")
    passport_check: str | None = None
    mail_subscription: OptionalInt = None
    ffinbank_requisites: FfinbankRequisites | None = None
    initial_telegram_id: OptionalStr = None
    passport_check_date: str | None = None
    last_shown_date_message: dict[str, int] | None = Field(
        default=None, alias="lastShownDateMessage"
    )
    utm_campaign_to_real: OptionalStr = Field(default=None, alias="utm_campaign - to Real")
    utm_campaign_register: str | None = Field(default=None, alias="utm_campaign - Register")
    telegram_last_updated_at: OptionalInt = None
    personal_anketa_last_date: str | None = None
    detected_reception_service: OptionalInt = None


class MessageCounts(_Model):
    no_read: LenientInt
    all: LenientInt


class TariffDetails(_Model):
    id: LenientInt
    name: str
    curr: str


class UserInfo(_Model):
    """Account holder profile."""

    id: OptionalInt = None
    group_id: OptionalInt = None
    login: str | None = None
    lastname: str | None = None
    firstname: str | None = None
    middlename: str | None = None
    last_first_middle_name: str | None = None
    first_last_name: str | None = None
    email: str | None = None
    mod_tmstmp: str | None = None
    rec_tmstmp: str | None = None
    last_visit_tmstmp: str | None = None
    umod_tmstmp: str | None = None
    date_tsmod: str | None = None
    date_last_request: str | None = None
    f_active: OptionalInt = None
    trader_systems_id: str | None = None
    f_demo: OptionalInt = None
    birthday: str | None = None
    sex: OptionalStr = None
    citizenship: str | None = None
    citizenship_code: str | None = None
    status: str | None = None
    user_type: str | None = Field(default=None, alias="type")
    status_id: OptionalInt = None
    utm_campaign: OptionalStr = None
    auth_login: str | None = None
    settlement_pair: str | None = None
    description: OptionalStr = None
    tel: str | None = None
    fb_uid: OptionalStr = None
    robot: OptionalInt = None
    minimum_investment: OptionalStr = None
    language: str | None = None
    additional_status: OptionalInt = None
    profilename: str | None = None
    reception: OptionalInt = None
    reception_service: OptionalInt = None
    briefnm_additional: OptionalStr = None
    manager_user_id: OptionalInt = None
    google_id: OptionalStr = None
    details: UserInfoDetails | None = None
    inn: str | None = None
    country: OptionalStr = None
    original_client_user_id: OptionalInt = None
    contact_id: OptionalStr = None
    role_name: str | None = None
    role: OptionalInt = None
    date_open_real: str | None = None
    numdoc: str | None = None
    docseries: str | None = None
    regname: str | None = None
    regcode: str | None = None
    datedoc: str | None = None
    documents: str | None = None
    bornplace: str | None = None
    f_kval: OptionalInt = None
    account_block_date: str | None = None
    client_date_close: OptionalStr = None
    date_client_doc_received: str | None = None
    iis: str | None = None
    isleadaccount: str | None = None
    mkt_codes: str | None = None
    object_type: str | None = None
    registered_at_domain: str | None = None
    email_confirm: OptionalInt = None
    blocks_count: OptionalInt = None
    is_ipo_available: bool | None = Field(default=None, alias="isIpoAvailable")
    currently_available_ipos: OptionalInt = Field(default=None, alias="currentlyAvailableIpos")
    is_subscribed_to_new_ipos: OptionalInt = Field(default=None, alias="isSubscribedToNewIpos")
    is_stock_bonus_available: bool | None = Field(default=None, alias="isStockBonusAvailable")
    stock_bonus_id_key: bool | None = Field(default=None, alias="stockBonusIdKey")
    kassa_nova_invest_card_available: bool | None = Field(
        default=None, alias="kassaNovaInvestCardAvailable"
    )
    messages_counts: MessageCounts | None = None
    tariff_details: TariffDetails | None = Field(default=None, alias="tariffDetails")


class UserOptions(_Model):
    """Terminal preferences."""

    cost_open: OptionalInt = None
    cost_last: OptionalInt = None
    cost_low: OptionalInt = None
    cost_high: OptionalInt = None
    bid_last: OptionalInt = None
    offer_last: OptionalInt = None
    volume: OptionalInt = None
    graphic_type: OptionalInt = None
    graphic_format: str | None = None
    period: str | None = None
    time_period: str | None = None
    interval: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    api_secret: str | None = None
    f_transaction: OptionalInt = None
    f_compare_index: OptionalInt = None
    graphic_indicators: str | None = None
    profile_type: OptionalInt = None
    show_portfolio_block: OptionalInt = Field(default=None, alias="showPortfolioBlock")
    page_first_tab_open: OptionalInt = Field(default=None, alias="pageFirstTabOpen")
    cover: str | None = None
    access_cost: OptionalInt = None
    theme: str | None = None
    show_transactions_mode: str | None = Field(default=None, alias="showTransactionsMode")
    grid_portfolio: list[str] | None = Field(default=None, alias="gridPortfolio")


class Opq(_Model):
    """Account snapshot."""

    rev: LenientInt
    init_margin: LenientInt
    brief_nm: str
    reception: LenientInt
    active: LenientInt
    quotes: Quotes
    ps: PortfolioSummary
    orders: Orders
    sess: list[Any] = Field(default_factory=list)
    markets: MarketsWrapper
    source: str
    offbalance: Offbalance
    home_currency: str = Field(alias="homeCurrency")
    user_lists: UserLists = Field(alias="userLists")
    no_order_growls: OptionalStr = Field(default=None, alias="NO_ORDER_GROWLS")
    user_info: UserInfo = Field(alias="userInfo")
    user_options: UserOptions = Field(alias="userOptions")


class UserDataResponse(_Model):
    opq: Opq = Field(alias="OPQ")


# Path reported when the payload itself has the wrong shape
ROOT_PATH = "<root>"


def _format_loc(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc) or ROOT_PATH


def decode_user_data(payload: Any) -> UserDataResponse:
    """Decode a ``getOPQ`` response into ``UserDataResponse``.

    Raises:
        DecodeError: A field could not be coerced; ``path`` names the first
            offending location, e.g. ``OPQ.ps.pos.0.q``
    """
    try:
        return UserDataResponse.model_validate(payload)
    except ValidationError as exc:
        errors = exc.errors(include_url=False)
        first = errors[0]
        raise DecodeError(first["msg"], path=_format_loc(first["loc"]), errors=errors) from exc
