# pynemo/queries/catalog.py

"""
Registry of the read-only queries run against a scenario store before a
solve step.

Each entry is a ``QuerySpec``: a name, a builder that renders the SQL for
a given set of ``QueryFlags``, and a condition deciding whether the query
belongs to the step at all. Queries read parameter ``_def`` views, the
dimension tables, TransmissionModelingEnabled, TransmissionLine, and the
working tables ``nodalstorage`` and ``yearintervals``; they never write.

The SQL depends on the flags only, never on store contents, so the
catalog can be rendered and inspected without a database.
"""

from typing import Callable, NamedTuple, Tuple

from .flags import QueryFlags


class QuerySpec(NamedTuple):
    """A named query with its SQL builder and inclusion condition."""
    name: str
    build: Callable[[QueryFlags], str]
    condition: Callable[[QueryFlags], bool]


def _always(flags: QueryFlags) -> bool:
    return True


def _transmission(flags: QueryFlags) -> bool:
    return flags.transmission_modeling


def _transmission_vproduction(flags: QueryFlags) -> bool:
    return flags.transmission_modeling and flags.vproductionbytechnology_saved


def _transmission_vuse(flags: QueryFlags) -> bool:
    return flags.transmission_modeling and flags.vusebytechnology_saved


def _previous_group(flags: QueryFlags) -> bool:
    return flags.has_previous_group


# -----------------------------------------------------------------------------
# Shared fragments
# -----------------------------------------------------------------------------

def _nonzero_ratio(table: str, flags: QueryFlags) -> str:
    """Distinct (r, t, f, y) with a non-zero activity ratio in `table`."""
    return (
        f"(select distinct r, t, f, y from {table}_def "
        f"where val <> 0 {flags.years_in('y')})"
    )


_NODAL_TECHNOLOGIES = (
    "(select distinct n.r, ntc.t, ntc.y from NodalDistributionTechnologyCapacity_def ntc, NODE n "
    "where ntc.n = n.val and ntc.val > 0) ntcr"
)


# -----------------------------------------------------------------------------
# Demand, activity and trade
# -----------------------------------------------------------------------------

def _vrateofdemandnn(flags: QueryFlags) -> str:
    return f"""select sdp.r as r, sdp.f as f, sdp.l as l, sdp.y as y,
    cast(sdp.val as real) as specifieddemandprofile, cast(sad.val as real) as specifiedannualdemand,
    cast(ys.val as real) as ys
    from SpecifiedDemandProfile_def sdp, SpecifiedAnnualDemand_def sad, YearSplit_def ys
    left join TransmissionModelingEnabled tme on tme.r = sad.r and tme.f = sad.f and tme.y = sad.y
    where sad.r = sdp.r and sad.f = sdp.f and sad.y = sdp.y
    and ys.l = sdp.l and ys.y = sdp.y
    and sdp.val <> 0 and sad.val <> 0 and ys.val <> 0
    {flags.years_in('sdp.y')}
    and tme.id is null"""


def _vrateofactivityvar(flags: QueryFlags) -> str:
    return f"""with ar as (select r, t, m, y from OutputActivityRatio_def
    where val <> 0 {flags.years_in('y')}
    union
    select r, t, m, y from InputActivityRatio_def
    where val <> 0 {flags.years_in('y')})
    select r.val as r, l.val as l, t.val as t, m.val as m, y.val as y
    from REGION r, TIMESLICE l, TECHNOLOGY t, MODE_OF_OPERATION m, YEAR y, ar
    where ar.r = r.val and ar.t = t.val and ar.m = m.val and ar.y = y.val
    order by r.val, t.val, l.val, y.val"""


def _vtrade(flags: QueryFlags) -> str:
    return f"""select r.val as r, rr.val as rr, l.val as l, f.val as f, y.val as y
    from REGION r, REGION rr, TIMESLICE l, FUEL f, YEAR y, TradeRoute_def tr
    where r.val = tr.r and rr.val = tr.rr and f.val = tr.f and y.val = tr.y
    and tr.r <> tr.rr and tr.val = 1 {flags.years_in('tr.y')}
    order by r.val, rr.val, f.val, y.val"""


def _vtradeannual(flags: QueryFlags) -> str:
    return f"""select r.val as r, rr.val as rr, f.val as f, y.val as y
    from REGION r, REGION rr, FUEL f, YEAR y, TradeRoute_def tr
    where r.val = tr.r and rr.val = tr.rr and f.val = tr.f and y.val = tr.y
    and tr.r <> tr.rr and tr.val = 1 {flags.years_in('tr.y')}"""


# -----------------------------------------------------------------------------
# Production
# -----------------------------------------------------------------------------

def _vrateofproductionbytechnologybymodenn(flags: QueryFlags) -> str:
    # fs_t is populated if t produces from non-nodal storage
    return f"""select r.val as r, ys.l as l, t.val as t, m.val as m, f.val as f, y.val as y,
    cast(oar.val as real) as oar, cast(ys.val as real) as ys, fs.t as fs_t, cast(ret.val as real) as ret
    from REGION r, YearSplit_def ys, TECHNOLOGY t, MODE_OF_OPERATION m, FUEL f, YEAR y, OutputActivityRatio_def oar
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    left join (select distinct tfs.r, tfs.t, tfs.m, y.val as y from TechnologyFromStorage_def tfs, YEAR y
        left join nodalstorage ns on ns.r = tfs.r and ns.s = tfs.s and ns.y = y.val
        where tfs.val > 0 {flags.years_in('y.val')}
        and ns.r is null) fs on fs.r = r.val and fs.t = t.val and fs.m = m.val and fs.y = y.val
    left join RETagTechnology_def ret on ret.r = r.val and ret.t = t.val and ret.y = y.val
    where oar.r = r.val and oar.t = t.val and oar.f = f.val and oar.m = m.val and oar.y = y.val
    and oar.val <> 0
    and ys.y = y.val
    and tme.id is null
    {flags.years_in('y.val')}
    order by r.val, f.val, y.val, ys.l, t.val"""


def _vrateofproductionbytechnologynn(flags: QueryFlags) -> str:
    return f"""select r.val as r, ys.l as l, t.val as t, f.val as f, y.val as y, cast(ys.val as real) as ys
    from REGION r, YearSplit_def ys, TECHNOLOGY t, FUEL f, YEAR y,
    {_nonzero_ratio('OutputActivityRatio', flags)} oar
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    where oar.r = r.val and oar.t = t.val and oar.f = f.val and oar.y = y.val
    and ys.y = y.val
    and tme.id is null
    order by r.val, ys.l, f.val, y.val"""


def _vproductionbytechnologyannual(flags: QueryFlags) -> str:
    oar = _nonzero_ratio('OutputActivityRatio', flags)
    return f"""select * from (
    select r.val as r, t.val as t, f.val as f, y.val as y, null as n, ys.l as l,
    cast(ys.val as real) as ys
    from REGION r, TECHNOLOGY t, FUEL f, YEAR y, YearSplit_def ys, {oar} oar
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    where oar.r = r.val and oar.t = t.val and oar.f = f.val and oar.y = y.val
    and ys.y = y.val
    and tme.id is null
    union all
    select n.r as r, ntc.t as t, oar.f as f, ntc.y as y, ntc.n as n, ys.l as l,
    cast(ys.val as real) as ys
    from NodalDistributionTechnologyCapacity_def ntc, NODE n,
    TransmissionModelingEnabled tme, YearSplit_def ys, {oar} oar
    where ntc.val > 0
    and ntc.n = n.val
    and tme.r = n.r and tme.f = oar.f and tme.y = ntc.y
    and oar.r = n.r and oar.t = ntc.t and oar.y = ntc.y
    and ntc.y = ys.y
    )
    order by r, t, f, y"""


# -----------------------------------------------------------------------------
# Use
# -----------------------------------------------------------------------------

def _vrateofusebytechnologybymodenn(flags: QueryFlags) -> str:
    return f"""select r.val as r, ys.l as l, t.val as t, m.val as m, f.val as f, y.val as y, cast(iar.val as real) as iar
    from REGION r, YearSplit_def ys, TECHNOLOGY t, MODE_OF_OPERATION m, FUEL f, YEAR y, InputActivityRatio_def iar
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    left join {_NODAL_TECHNOLOGIES}
        on ntcr.r = r.val and ntcr.t = t.val and ntcr.y = y.val
    where iar.r = r.val and iar.t = t.val and iar.f = f.val and iar.m = m.val and iar.y = y.val and iar.val <> 0
    and ys.y = y.val
    and (tme.id is null or (tme.id is not null and ntcr.t is null))
    {flags.years_in('y.val')}
    order by r.val, ys.l, t.val, f.val, y.val"""


def _vrateofusebytechnologynn(flags: QueryFlags) -> str:
    return f"""with iar as {_nonzero_ratio('InputActivityRatio', flags)}
    select r.val as r, ys.l as l, t.val as t, f.val as f, y.val as y, cast(ys.val as real) as ys
    from REGION r, YearSplit_def ys, TECHNOLOGY t, FUEL f, YEAR y, iar
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    where iar.r = r.val and iar.t = t.val and iar.f = f.val and iar.y = y.val
    and ys.y = y.val
    and tme.id is null
    union all
    select r.val as r, ys.l as l, t.val as t, f.val as f, y.val as y, cast(ys.val as real) as ys
    from REGION r, YearSplit_def ys, TECHNOLOGY t, FUEL f, YEAR y, TransmissionModelingEnabled tme, iar
    left join {_NODAL_TECHNOLOGIES}
        on ntcr.r = r.val and ntcr.t = t.val and ntcr.y = y.val
    where ys.y = y.val
    and tme.r = r.val and tme.f = f.val and tme.y = y.val
    and iar.r = r.val and iar.t = t.val and iar.f = f.val and iar.y = y.val
    and ntcr.t is null
    order by r, l, f, y"""


def _vusebytechnologyannual(flags: QueryFlags) -> str:
    return f"""with iar as {_nonzero_ratio('InputActivityRatio', flags)}
    select * from (
    select r.val as r, t.val as t, f.val as f, y.val as y, null as n, ys.l as l, cast(ys.val as real) as ys
    from REGION r, TECHNOLOGY t, FUEL f, YEAR y, YearSplit_def ys, iar
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    where iar.r = r.val and iar.t = t.val and iar.f = f.val and iar.y = y.val
    and ys.y = y.val
    and tme.id is null
    union all
    select r.val as r, t.val as t, f.val as f, y.val as y, null as n, ys.l as l, cast(ys.val as real) as ys
    from REGION r, TECHNOLOGY t, FUEL f, YEAR y, YearSplit_def ys, iar, TransmissionModelingEnabled tme
    left join {_NODAL_TECHNOLOGIES}
        on ntcr.r = r.val and ntcr.t = t.val and ntcr.y = y.val
    where ys.y = y.val
    and tme.r = r.val and tme.f = f.val and tme.y = y.val
    and iar.r = r.val and iar.t = t.val and iar.f = f.val and iar.y = y.val
    and ntcr.t is null
    union all
    select n.r as r, ntc.t as t, iar.f as f, ntc.y as y, ntc.n as n, ys.l as l,
    cast(ys.val as real) as ys
    from NodalDistributionTechnologyCapacity_def ntc, NODE n,
    TransmissionModelingEnabled tme, YearSplit_def ys, iar
    where ntc.val > 0
    and ntc.n = n.val
    and tme.r = n.r and tme.f = iar.f and tme.y = ntc.y
    and iar.r = n.r and iar.t = ntc.t and iar.y = ntc.y
    and ntc.y = ys.y
    )
    order by r, t, f, y"""


# -----------------------------------------------------------------------------
# Capacity, discounting and emissions
# -----------------------------------------------------------------------------

def _caa5_totalnewcapacity(flags: QueryFlags) -> str:
    return f"""select cot.r as r, cot.t as t, cot.y as y, cast(cot.val as real) as cot
    from CapacityOfOneTechnologyUnit_def cot where cot.val <> 0 {flags.years_in('cot.y')}"""


def _rtydr(flags: QueryFlags) -> str:
    if flags.has_previous_group:
        prev, join = (
            "cast(v.val as real)",
            "left join vtotaltechnologyannualactivity v on v.r = r.val and v.t = t.val and v.y = (y.val - yi.intv)",
        )
    else:
        prev, join = "null", ""
    return f"""select r.val as r, t.val as t, y.val as y, cast(dr.val as real) as dr,
    {prev} as prevcalcval
    from REGION r, TECHNOLOGY t, YEAR y, DiscountRate_def dr, yearintervals yi
    {join}
    where dr.r = r.val {flags.years_in('y.val')}
    and yi.y = y.val
    order by r.val, t.val"""


def _vannualtechnologyemissionbymode(flags: QueryFlags) -> str:
    return f"""select r, t, e, y, m, cast(val as real) as ear
    from EmissionActivityRatio_def ear {flags.years_in('y', keyword='where')}
    order by r, t, e, y"""


def _vannualtechnologyemissionpenaltybyemission(flags: QueryFlags) -> str:
    return f"""select r.val as r, t.val as t, y.val as y, e.val as e, cast(ep.val as real) as ep
    from REGION r, TECHNOLOGY t, EMISSION e, YEAR y
    left join EmissionsPenalty_def ep on ep.r = r.val and ep.e = e.val and ep.y = y.val and ep.val <> 0
    {flags.years_in('y.val', keyword='where')}
    order by r.val, t.val, y.val"""


def _vmodelperiodemissions(flags: QueryFlags) -> str:
    return """select r.val as r, e.val as e, cast(mpl.val as real) as mpl
    from REGION r, EMISSION e, ModelPeriodEmissionLimit_def mpl
    where mpl.r = r.val and mpl.e = e.val"""


def _rempe(flags: QueryFlags) -> str:
    if flags.has_previous_group:
        prev, join = (
            "cast(v.val as real)",
            "left join vannualemissions v on v.r = r.val and v.e = e.val and v.y = (y.val - yi.intv)",
        )
    else:
        prev, join = "null", ""
    return f"""select r.val as r, e.val as e, y.val as y, cast(mpe.val as real) as mpe,
    {prev} as prevcalcval
    from REGION r, EMISSION e, YEAR y, yearintervals yi
    left join ModelPeriodExogenousEmission_def mpe on mpe.r = r.val and mpe.e = e.val
    {join}
    where yi.y = y.val {flags.years_in('y.val')}
    order by r.val, e.val, y.val"""


# -----------------------------------------------------------------------------
# Transmission modeling
# -----------------------------------------------------------------------------

def _vrateofactivitynodal(flags: QueryFlags) -> str:
    return f"""select ntc.n as n, l.val as l, ntc.t as t, ar.m as m, ntc.y as y
    from NodalDistributionTechnologyCapacity_def ntc, NODE n,
        TransmissionModelingEnabled tme, TIMESLICE l,
    (select r, t, f, m, y from OutputActivityRatio_def
    where val <> 0 {flags.years_in('y')}
    union
    select r, t, f, m, y from InputActivityRatio_def
    where val <> 0 {flags.years_in('y')}) ar
    where ntc.val > 0
    and ntc.n = n.val
    and tme.r = n.r and tme.f = ar.f and tme.y = ntc.y
    and ar.r = n.r and ar.t = ntc.t and ar.y = ntc.y
    order by ntc.n, ntc.t, l.val, ntc.y"""


def _nodal_flow(ratio: str, alias: str, flags: QueryFlags, select: str, order: str = "") -> str:
    """Nodal technologies with a non-zero `ratio`, per timeslice."""
    return f"""{select}
    from NodalDistributionTechnologyCapacity_def ntc, YearSplit_def ys, NODE n,
    TransmissionModelingEnabled tme,
    {_nonzero_ratio(ratio, flags)} {alias}
    where ntc.val > 0
    and ntc.y = ys.y
    and ntc.n = n.val
    and tme.r = n.r and tme.f = {alias}.f and tme.y = ntc.y
    and {alias}.r = n.r and {alias}.t = ntc.t and {alias}.y = ntc.y
    {order}""".rstrip()


def _vrateofproductionbytechnologynodal(flags: QueryFlags) -> str:
    return _nodal_flow(
        'OutputActivityRatio', 'oar', flags,
        "select ntc.n as n, ys.l as l, ntc.t as t, oar.f as f, ntc.y as y, cast(ys.val as real) as ys",
        "order by ntc.n, ys.l, oar.f, ntc.y",
    )


def _vrateofusebytechnologynodal(flags: QueryFlags) -> str:
    return _nodal_flow(
        'InputActivityRatio', 'iar', flags,
        "select ntc.n as n, ys.l as l, ntc.t as t, iar.f as f, ntc.y as y, cast(ys.val as real) as ys",
        "order by ntc.n, ys.l, iar.f, ntc.y",
    )


def _vproductionbytechnologyindices_nodalpart(flags: QueryFlags) -> str:
    return _nodal_flow(
        'OutputActivityRatio', 'oar', flags,
        "select distinct n.r as r, ys.l as l, ntc.t as t, oar.f as f, ntc.y as y, null as ys",
    )


def _vproductionbytechnologynodal(flags: QueryFlags) -> str:
    return _nodal_flow(
        'OutputActivityRatio', 'oar', flags,
        "select n.r as r, ntc.n as n, ys.l as l, ntc.t as t, oar.f as f, ntc.y as y, cast(ys.val as real) as ys",
        "order by n.r, ys.l, ntc.t, oar.f, ntc.y",
    )


def _vusebytechnologyindices_nodalpart(flags: QueryFlags) -> str:
    return _nodal_flow(
        'InputActivityRatio', 'iar', flags,
        "select distinct n.r as r, ys.l as l, ntc.t as t, iar.f as f, ntc.y as y, null as ys",
    )


def _vusebytechnologynodal(flags: QueryFlags) -> str:
    return _nodal_flow(
        'InputActivityRatio', 'iar', flags,
        "select n.r as r, ntc.n as n, ys.l as l, ntc.t as t, iar.f as f, ntc.y as y, cast(ys.val as real) as ys",
        "order by n.r, ys.l, ntc.t, iar.f, ntc.y",
    )


def _vtransmissionbyline(flags: QueryFlags) -> str:
    # Annual node-pair limits apply to a line in either direction
    return f"""select tl.id as tr, ys.l as l, tl.f as f, tme1.y as y, tl.n1 as n1, tl.n2 as n2,
    tl.reactance as reactance, tme1.type as type, tl.maxflow as maxflow,
    cast(tl.variablecost as real) as vc, cast(ys.val as real) as ys,
    cast(tl.fixedcost as real) as fc, cast(tcta.val as real) as tcta, cast(tl.efficiency as real) as eff,
    cast(taf.val as real) as taf,
    case when mtn.n2 = tl.n1 then cast(mtn.val as real) else null end as n1_mtn,
    case when mtn.n2 = tl.n2 then cast(mtn.val as real) else null end as n2_mtn,
    case when mxtn.n2 = tl.n1 then cast(mxtn.val as real) else null end as n1_mxtn,
    case when mxtn.n2 = tl.n2 then cast(mxtn.val as real) else null end as n2_mxtn
    from TransmissionLine tl, NODE n1, NODE n2, TransmissionModelingEnabled tme1,
    TransmissionModelingEnabled tme2, YearSplit_def ys, TransmissionCapacityToActivityUnit_def tcta,
    TransmissionAvailabilityFactor_def taf
    left join MinAnnualTransmissionNodes_def mtn on ((mtn.n1 = tl.n1 and mtn.n2 = tl.n2) or (mtn.n1 = tl.n2 and mtn.n2 = tl.n1))
        and mtn.f = tl.f and mtn.y = tme1.y
    left join MaxAnnualTransmissionNodes_def mxtn on ((mxtn.n1 = tl.n1 and mxtn.n2 = tl.n2) or (mxtn.n1 = tl.n2 and mxtn.n2 = tl.n1))
        and mxtn.f = tl.f and mxtn.y = tme1.y
    where tl.n1 = n1.val and tl.n2 = n2.val
    and tme1.r = n1.r and tme1.f = tl.f
    and tme2.r = n2.r and tme2.f = tl.f
    and tme1.y = tme2.y and tme1.type = tme2.type
    and ys.y = tme1.y {flags.years_in('ys.y')}
    and tcta.r = n1.r and tl.f = tcta.f
    and taf.tr = tl.id and taf.l = ys.l and taf.y = tme1.y
    order by tl.id, tme1.y"""


def _vtransmissionlosses(flags: QueryFlags) -> str:
    return f"""select tl.id as tr, tl.n1, tl.n2, ys.l as l, tl.f as f, tme1.y as y
    from TransmissionLine tl, NODE n1, NODE n2, TransmissionModelingEnabled tme1,
    TransmissionModelingEnabled tme2, YearSplit_def ys
    where tl.efficiency < 1
    and tl.n1 = n1.val and tl.n2 = n2.val
    and tme1.r = n1.r and tme1.f = tl.f
    and tme2.r = n2.r and tme2.f = tl.f
    and tme1.y = tme2.y and tme1.type = tme2.type and tme1.type = 3
    and ys.y = tme1.y {flags.years_in('ys.y')}"""


def _vstorageleveltsgroup1(flags: QueryFlags) -> str:
    return f"""select ns.n as n, ns.s as s, tg1.name as tg1, ns.y as y
    from nodalstorage ns, TSGROUP1 tg1 {flags.years_in('ns.y', keyword='where')}"""


def _vstorageleveltsgroup2(flags: QueryFlags) -> str:
    return f"""select ns.n as n, ns.s as s, tg1.name as tg1, tg2.name as tg2, ns.y as y
    from nodalstorage ns, TSGROUP1 tg1, TSGROUP2 tg2 {flags.years_in('ns.y', keyword='where')}"""


def _vstoragelevelts(flags: QueryFlags) -> str:
    return f"""select ns.n as n, ns.s as s, l.val as l, ns.y as y
    from nodalstorage ns, TIMESLICE l {flags.years_in('ns.y', keyword='where')}"""


def _vrateofproduse(flags: QueryFlags) -> str:
    return f"""select r.val as r, l.val as l, f.val as f, y.val as y, tme.id as tme, n.val as n
    from REGION r, TIMESLICE l, FUEL f, YEAR y, YearSplit_def ys
    left join TransmissionModelingEnabled tme on tme.r = r.val and tme.f = f.val and tme.y = y.val
    left join NODE n on n.r = r.val
    where ys.l = l.val and ys.y = y.val
    {flags.years_in('y.val')}
    order by r.val, l.val, f.val, y.val"""


def _trydr(flags: QueryFlags) -> str:
    return f"""select tl.id as tr, y.val as y, cast(dr.val as real) as dr
    from TransmissionLine tl, NODE n, YEAR y, DiscountRate_def dr
    where tl.n1 = n.val
    and dr.r = n.r
    {flags.years_in('y.val')}"""


# -----------------------------------------------------------------------------
# Limited foresight
# -----------------------------------------------------------------------------

def _vannualemissions(flags: QueryFlags) -> str:
    return f"""select r as vr, e as ve, y as vy, cast(val as real) as vval
    from vannualemissions where y = '{int(flags.last_year_prev_group)}'"""


QUERY_SPECS: Tuple[QuerySpec, ...] = (
    QuerySpec("queryvrateofdemandnn", _vrateofdemandnn, _always),
    QuerySpec("queryvrateofactivityvar", _vrateofactivityvar, _always),
    QuerySpec("queryvtrade", _vtrade, _always),
    QuerySpec("queryvtradeannual", _vtradeannual, _always),
    QuerySpec("queryvrateofproductionbytechnologybymodenn", _vrateofproductionbytechnologybymodenn, _always),
    QuerySpec("queryvrateofproductionbytechnologynn", _vrateofproductionbytechnologynn, _always),
    QuerySpec("queryvproductionbytechnologyannual", _vproductionbytechnologyannual, _always),
    QuerySpec("queryvrateofusebytechnologybymodenn", _vrateofusebytechnologybymodenn, _always),
    QuerySpec("queryvrateofusebytechnologynn", _vrateofusebytechnologynn, _always),
    QuerySpec("queryvusebytechnologyannual", _vusebytechnologyannual, _always),
    QuerySpec("querycaa5_totalnewcapacity", _caa5_totalnewcapacity, _always),
    QuerySpec("queryrtydr", _rtydr, _always),
    QuerySpec("queryvannualtechnologyemissionbymode", _vannualtechnologyemissionbymode, _always),
    QuerySpec(
        "queryvannualtechnologyemissionpenaltybyemission", _vannualtechnologyemissionpenaltybyemission, _always
    ),
    QuerySpec("queryvmodelperiodemissions", _vmodelperiodemissions, _always),
    QuerySpec("queryrempe", _rempe, _always),
    QuerySpec("queryvrateofactivitynodal", _vrateofactivitynodal, _transmission),
    QuerySpec("queryvrateofproductionbytechnologynodal", _vrateofproductionbytechnologynodal, _transmission),
    QuerySpec("queryvrateofusebytechnologynodal", _vrateofusebytechnologynodal, _transmission),
    QuerySpec(
        "queryvproductionbytechnologyindices_nodalpart", _vproductionbytechnologyindices_nodalpart,
        _transmission_vproduction,
    ),
    QuerySpec("queryvproductionbytechnologynodal", _vproductionbytechnologynodal, _transmission_vproduction),
    QuerySpec("queryvusebytechnologyindices_nodalpart", _vusebytechnologyindices_nodalpart, _transmission_vuse),
    QuerySpec("queryvusebytechnologynodal", _vusebytechnologynodal, _transmission_vuse),
    QuerySpec("queryvtransmissionbyline", _vtransmissionbyline, _transmission),
    QuerySpec("queryvtransmissionlosses", _vtransmissionlosses, _transmission),
    QuerySpec("queryvstorageleveltsgroup1", _vstorageleveltsgroup1, _transmission),
    QuerySpec("queryvstorageleveltsgroup2", _vstorageleveltsgroup2, _transmission),
    QuerySpec("queryvstoragelevelts", _vstoragelevelts, _transmission),
    QuerySpec("queryvrateofproduse", _vrateofproduse, _transmission),
    QuerySpec("querytrydr", _trydr, _transmission),
    QuerySpec("vannualemissions", _vannualemissions, _previous_group),
)
