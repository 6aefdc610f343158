import streamlit as st
import matplotlib
matplotlib.use("Agg")

from pnsim.materials.database import get_material, list_materials, with_overrides
from pnsim.models.pn_junction import analyze_junction
from pnsim.physics.equilibrium import BandDisplay, JunctionParams
from pnsim.physics.profiles import ProfileWindow
from pnsim.postprocess.visualization import plot_band_diagram, plot_carriers, plot_electrostatics
from pnsim.utils.units import V_per_m_to_V_per_cm, m3_to_cm3, m_to_um

st.set_page_config(page_title="pnsim Viewer", layout="wide")
st.title("PN Junction at Equilibrium")


def _doping_input(label: str, mantissa: float, exponent: int) -> float:
    c1, c2 = st.sidebar.columns(2)
    m = c1.number_input(f"{label} mantissa", min_value=0.0, max_value=9.99, value=mantissa, step=0.1)
    e = c2.number_input(f"{label} exponent", min_value=10, max_value=22, value=exponent, step=1)
    return float(m) * 10.0 ** int(e)


st.sidebar.header("Doping [cm⁻³]")
NA_cm3 = _doping_input("NA", 1.0, 17)
ND_cm3 = _doping_input("ND", 1.0, 17)

st.sidebar.header("Material")
name = st.sidebar.selectbox("Semiconductor", list_materials(), index=list_materials().index("Si"))
T_K = st.sidebar.number_input("Temperature [K]", min_value=1.0, max_value=1000.0, value=300.0, step=10.0)
scaled = st.sidebar.checkbox("Scale n_i with T", value=False)

st.sidebar.header("Display")
half_um = st.sidebar.slider("Window half width [µm]", 0.05, 5.0, 0.5, 0.05)
bend = st.sidebar.slider("Band-bending exaggeration", 1.0, 3.0, 1.8, 0.1)
smooth = st.sidebar.slider("Edge smoothing (fraction of W)", 0.0, 0.5, 0.15, 0.01)

mat = get_material(name)
if scaled:
    mat = with_overrides(mat, ni_model="scaled")

# Recomputed on every widget change; the previous report is simply replaced.
rep = analyze_junction(
    JunctionParams.from_cm3(NA_cm3, ND_cm3, T_K),
    mat=mat,
    window=ProfileWindow(half_width_m=half_um * 1e-6),
    display=BandDisplay(band_bending_factor=bend, edge_smoothing=smooth),
)
eq, c, prof = rep.equilibrium, rep.carriers, rep.profiles

if prof.degenerate:
    st.warning("Inputs give no depletion region (check that NA·ND > nᵢ²).")
    st.stop()

m1, m2, m3, m4 = st.columns(4)
m1.metric("V_bi", f"{eq.Vbi_V:.4f} V")
m2.metric("W", f"{float(m_to_um(eq.W_m)):.4f} µm")
m3.metric("x_p | x_n", f"{float(m_to_um(eq.xp_m)):.3f} | {float(m_to_um(eq.xn_m)):.3f} µm")
m4.metric("|E|max", f"{float(V_per_m_to_V_per_cm(eq.Emax_V_per_m)):.3e} V/cm")

left, right = st.columns(2)
with left:
    fig, _ = plot_band_diagram(prof.x_m, prof.Ec.values, prof.Ev.values, prof.EF.values, prof.Ei.values)
    st.pyplot(fig)
    figC, _ = plot_carriers(prof)
    st.pyplot(figC)
with right:
    figE, _ = plot_electrostatics(prof)
    st.pyplot(figE)

st.caption(
    f"n-side: n = {float(m3_to_cm3(c.nN_m3)):.3e}, p = {float(m3_to_cm3(c.pN_m3)):.3e} cm⁻³ · "
    f"p-side: p = {float(m3_to_cm3(c.pP_m3)):.3e}, n = {float(m3_to_cm3(c.nP_m3)):.3e} cm⁻³ · "
    "Band bending is exaggerated for visibility; edge smoothing is cosmetic."
)
