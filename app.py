import logging

import streamlit as st

import rel_config
from rel_display import format_index, format_table, to_csv, to_records
from rel_engine import Domain, RelAlgError
from movie_db import movie_database

logging.basicConfig(level=rel_config.LOG_LEVEL)

st.set_page_config(page_title="Mini-Rel: Relation Workbench", page_icon="🧮", layout="wide")

OPERATIONS = ["project", "select (attribute = value)", "select (key)", "union", "minus",
              "intersect", "equi-join", "natural join"]


def _coerce(text: str, domain: Domain):
    # widget input is always text
    if domain.is_integer:
        return int(text)
    if domain.is_float:
        return float(text)
    return text


if "db" not in st.session_state:
    st.session_state.db = movie_database(index=rel_config.DEFAULT_INDEX_KIND)
db = st.session_state.db

st.title("🧮 Mini-Rel — Relation Workbench")
st.write(
    "In-memory relational algebra over a small movie database: "
    "π (project), σ (select), ⋃, −, ∩, ⋈ (equi-join and natural join)."
)

# Inputs
col1, col2 = st.columns([1, 1], gap="large")

with col1:
    st.subheader("Operation")
    op = st.selectbox("Operator", OPERATIONS)
    left = db[st.selectbox("Relation", list(db))]
    right = None
    if op in ("union", "minus", "intersect", "equi-join", "natural join"):
        right = db[st.selectbox("Second relation", list(db), index=1)]
    algorithm = rel_config.DEFAULT_JOIN_ALGORITHM
    if op in ("equi-join", "natural join"):
        algorithm = st.radio("Join algorithm", ["nested_loop", "hash", "index"],
                             index=["nested_loop", "hash", "index"].index(algorithm), horizontal=True)

with col2:
    st.subheader("Arguments")
    args = {}
    if op == "project":
        args["attrs"] = st.multiselect("Attributes", list(left.attributes), default=list(left.key))
    elif op == "select (attribute = value)":
        args["attr"] = st.selectbox("Attribute", list(left.attributes))
        args["value"] = st.text_input("Value")
    elif op == "select (key)":
        args["key"] = [st.text_input(k) for k in left.key]
    elif op == "equi-join":
        args["left_attrs"] = st.multiselect("Left attributes", list(left.attributes))
        args["right_attrs"] = st.multiselect("Right attributes", list(right.attributes))

# Visualize input relations
st.subheader("👀 Input Relations")
for rel in [left] + ([right] if right is not None else []):
    st.markdown(f"**{rel.name}** — attributes: {list(rel.attributes)}, key: {list(rel.key)}  \n_rows: {len(rel)}_")
    st.table(to_records(rel) or [])

# Run
if st.button("▶️ Run", type="primary"):
    try:
        if op == "project":
            result = left.project(args["attrs"])
        elif op == "select (attribute = value)":
            pos = left.col(args["attr"])
            value = _coerce(args["value"], left.domains[pos])
            result = left.select(lambda t: t[pos] == value)
        elif op == "select (key)":
            cols = left.schema.key_columns
            result = left.select(tuple(_coerce(v, left.domains[c]) for v, c in zip(args["key"], cols)))
        elif op == "union":
            result = left.union(right)
        elif op == "minus":
            result = left.minus(right)
        elif op == "intersect":
            result = left.intersect(right)
        elif op == "equi-join":
            result = left.join(args["left_attrs"], args["right_attrs"], right, algorithm=algorithm)
        else:
            result = left.join(right, algorithm=algorithm)
        st.success(f"{result.name}: {len(result)} tuple(s)")

        tabs = st.tabs(["Result Table", "Result Text", "Index"])
        with tabs[0]:
            if len(result):
                st.table(to_records(result))
                st.download_button("Download CSV", data=to_csv(result), file_name=f"{result.name}.csv",
                                   mime="text/csv")
            else:
                st.info("Empty result set.")
        with tabs[1]:
            st.code(format_table(result), language="text")
        with tabs[2]:
            st.code(format_index(result), language="text")

    except ValueError as e:
        st.error(f"Bad input value: {e}")
    except RelAlgError as e:
        st.error(f"{type(e).__name__}: {e}")
else:
    st.caption("Pick an operator and press **Run**.")
