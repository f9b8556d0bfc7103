from common.units import Q_

g0 = Q_(9.80665, "m/s^2")
p_atm = Q_(101325, "pascal")
T_std = Q_(288.15, "kelvin")
R_univ = Q_(8.314462618, "J/mol/K")

# Perfect gases: gamma, R and Sutherland data (mu_ref at T_ref, constant S).
gases = {
    "air": {
        "gamma": Q_(1.40, "dimensionless"),
        "R":      Q_(287.0, "J/kg/K"),
        "mu_ref": Q_(1.716e-5, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(110.4, "kelvin"),
    },
    "N2": {
        "gamma": Q_(1.40, "dimensionless"),
        "R":      Q_(296.8, "J/kg/K"),
        "mu_ref": Q_(1.663e-5, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(107.0, "kelvin"),
    },
    "O2": {
        "gamma": Q_(1.40, "dimensionless"),
        "R":      Q_(259.8, "J/kg/K"),
        "mu_ref": Q_(1.919e-5, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(139.0, "kelvin"),
    },
    "CO2": {
        "gamma": Q_(1.30, "dimensionless"),
        "R":      Q_(188.9, "J/kg/K"),
        "mu_ref": Q_(1.370e-5, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(222.0, "kelvin"),
    },
    "He": {
        "gamma": Q_(1.66, "dimensionless"),
        "R":      Q_(2077.0, "J/kg/K"),
        "mu_ref": Q_(1.870e-5, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(79.4, "kelvin"),
    },
    "H2": {
        "gamma": Q_(1.41, "dimensionless"),
        "R":      Q_(4124.0, "J/kg/K"),
        "mu_ref": Q_(8.411e-6, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(97.0, "kelvin"),
    },
    "CH4": {
        "gamma": Q_(1.32, "dimensionless"),
        "R":      Q_(518.3, "J/kg/K"),
        "mu_ref": Q_(1.027e-5, "Pa*s"),
        "T_ref":  Q_(273.15, "kelvin"),
        "S":      Q_(198.0, "kelvin"),
    },
}

# Liquids at 20 degC, 1 atm.
liquids = {
    "water":    {"rho": Q_(998.0, "kg/m^3"),  "mu": Q_(1.002e-3, "Pa*s")},
    "seawater": {"rho": Q_(1025.0, "kg/m^3"), "mu": Q_(1.07e-3, "Pa*s")},
    "mercury":  {"rho": Q_(13550.0, "kg/m^3"), "mu": Q_(1.56e-3, "Pa*s")},
    "glycerin": {"rho": Q_(1260.0, "kg/m^3"), "mu": Q_(1.49, "Pa*s")},
    "kerosene": {"rho": Q_(804.0, "kg/m^3"),  "mu": Q_(1.92e-3, "Pa*s")},
    "gasoline": {"rho": Q_(680.0, "kg/m^3"),  "mu": Q_(2.92e-4, "Pa*s")},
}

# Absolute wall roughness of new commercial pipe.
roughness = {
    "drawn_tubing":     Q_(1.5, "micrometer"),
    "commercial_steel": Q_(45.0, "micrometer"),
    "wrought_iron":     Q_(45.0, "micrometer"),
    "galvanized_iron":  Q_(150.0, "micrometer"),
    "cast_iron":        Q_(260.0, "micrometer"),
    "concrete":         Q_(1.0, "millimeter"),
    "riveted_steel":    Q_(3.0, "millimeter"),
    "pvc":              Q_(0.0, "micrometer"),
}

# Loss coefficients of common fittings (based on the pipe velocity head).
minor_loss_K = {
    "sharp_entrance":   Q_(0.5, "dimensionless"),
    "rounded_entrance": Q_(0.04, "dimensionless"),
    "exit":             Q_(1.0, "dimensionless"),
    "elbow_90_regular": Q_(0.3, "dimensionless"),
    "elbow_90_long":    Q_(0.2, "dimensionless"),
    "elbow_45":         Q_(0.2, "dimensionless"),
    "gate_valve_open":  Q_(0.15, "dimensionless"),
    "globe_valve_open": Q_(10.0, "dimensionless"),
    "check_valve":      Q_(2.0, "dimensionless"),
    "tee_branch":       Q_(1.0, "dimensionless"),
}
