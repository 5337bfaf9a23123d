"""Seed the database with equipment types, the standard phase procedures and a starter parts catalog.

Procedures follow common rotating-equipment shop practice (EASA AR100,
API 682, ISO 21940, ISO 10816, ANSI/HI). Re-running is safe: procedures are
matched by (name, phase), parts by part number, and skipped when present.

    python scripts/seed_data.py [--admin-email EMAIL --admin-password PASSWORD]
"""

import argparse
import asyncio

from repairflow.db import crud
from repairflow.db.engine import async_session_factory, engine, init_db
from repairflow.services.auth import hash_password

EQUIPMENT_TYPES = [
    ("AC Induction Motor", "motor", "Three-phase squirrel-cage and wound-rotor motors"),
    ("Centrifugal Pump", "pump", "End-suction and split-case centrifugal pumps"),
    ("Gearbox", "gearbox", "Parallel-shaft and right-angle speed reducers"),
]

WAREHOUSE = "Main shop"

PARTS = [
    ("6309-2Z", "Deep groove ball bearing, 45mm bore, shielded", "bearings", 38.75, 4),
    ("6206-2RS", "Deep groove ball bearing, 30mm bore, sealed", "bearings", 14.20, 6),
    ("MS-1.375", "Mechanical seal, 1-3/8in shaft, carbon/SiC", "seals", 212.00, 2),
    ("GSK-256", "End bell gasket", "gaskets", 12.00, 4),
    ("MW-18", "Magnet wire, 18 AWG, 10 lb spool", "windings", 96.50, 1),
    ("VAR-1G", "Insulating varnish, 1 gal", "consumables", 58.00, 2),
    ("CPL-JAW-28", "Jaw coupling insert, size 28", "couplings", 9.80, 5),
]


def _m(name, unit="", **limits):
    spec = {"name": name, "unit": unit}
    spec.update(limits)
    return spec


PROCEDURES = [
    {
        "name": "Initial Testing & Verification",
        "procedure_type": "test",
        "phase": "initial_testing",
        "estimated_duration_minutes": 240,
        "steps": [
            {"title": "Equipment Identification", "step_type": "action", "photo_required": True,
             "instructions": "Record customer, model, serial number, HP/kW, voltage, speed, bearing type, "
                             "lubrication type, and seal arrangement. Document all nameplate data."},
            {"title": "Condition Assessment", "step_type": "inspection", "photo_required": True,
             "instructions": "Photograph equipment from every angle before cleaning. Note any damage, "
                             "corrosion, or missing hardware."},
            {"title": "Tag Orientation", "step_type": "action", "photo_required": True,
             "instructions": "Match-mark endbells, pump halves, couplings, and shafts for reference during "
                             "reassembly."},
            {"title": "Insulation Resistance (Megger) Test", "step_type": "measurement", "photo_required": True,
             "instructions": "Test at 500-5000V per nameplate. Record readings and correct to 40°C. Minimum "
                             "acceptable: >1MΩ for motors <1000V, >100MΩ for motors >1000V.",
             "measurements_required": [_m("IR Reading", "MΩ", min=1, target=100), _m("Temperature", "°C", target=40)]},
            {"title": "Polarization Index Test", "step_type": "measurement",
             "instructions": "Measure insulation resistance at 1 and 10 minutes. PI = IR(10min)/IR(1min). "
                             "Target ≥2.0; lower values indicate moisture or contamination.",
             "measurements_required": [_m("IR at 1 min", "MΩ"), _m("IR at 10 min", "MΩ"),
                                       _m("PI Ratio", min=2.0, target=3.0)]},
            {"title": "Winding Resistance Balance", "step_type": "measurement",
             "instructions": "Measure resistance of each phase winding. Acceptance: ≤2% variation between "
                             "highest and lowest.",
             "measurements_required": [_m("Phase A Resistance", "Ω"), _m("Phase B Resistance", "Ω"),
                                       _m("Phase C Resistance", "Ω"), _m("Variation", "%", max=2.0)]},
            {"title": "Mechanical Pre-Test: Shaft Play", "step_type": "measurement",
             "instructions": "Measure shaft endplay and radial play with dial indicators. Check for free "
                             "rotation without binding.",
             "measurements_required": [_m("Axial Endplay", "in", min=0.001, max=0.020),
                                       _m("Radial Play", "in", max=0.005)]},
            {"title": "Shaft Runout Measurement", "step_type": "measurement",
             "instructions": "Measure shaft runout TIR at multiple locations. Target ≤0.001-0.002 in per foot "
                             "of span.",
             "measurements_required": [_m("Runout TIR", "in", max=0.002), _m("Location", "in from end")]},
            {"title": "Lubrication Sample Collection", "step_type": "action",
             "instructions": "Collect oil or grease samples from bearings for viscosity, contamination and "
                             "wear-metal analysis. Label with equipment ID and date."},
        ],
    },
    {
        "name": "Equipment Cleaning & Drying",
        "procedure_type": "cleaning",
        "phase": "initial_testing",
        "estimated_duration_minutes": 360,
        "steps": [
            {"title": "Dry Cleaning", "step_type": "action",
             "instructions": "Blow off loose debris with compressed air. Scrape gasket surfaces clean without "
                             "damaging machined surfaces."},
            {"title": "Solvent Wash (External)", "step_type": "action",
             "instructions": "Wash external surfaces with alkaline detergent or non-chlorinated solvent. Do not "
                             "immerse windings.",
             "safety_notes": "Wear chemical-resistant gloves and eye protection. Work in a ventilated area."},
            {"title": "Bake Dry", "step_type": "action",
             "instructions": "Bake at 250°F (120°C) for at least 4 hours or until moisture content <5%.",
             "measurements_required": [_m("Oven Temperature", "°F", target=250), _m("Duration", "hours", min=4)]},
            {"title": "Post-Dry IR & PI Retest", "step_type": "measurement",
             "instructions": "Retest insulation resistance and polarization index after drying. If still low, "
                             "plan for rewind or VPI re-varnish.",
             "measurements_required": [_m("IR Reading", "MΩ", min=10), _m("PI Ratio", min=2.0)]},
        ],
    },
    {
        "name": "Equipment Teardown & Component Inspection",
        "procedure_type": "teardown",
        "phase": "teardown",
        "estimated_duration_minutes": 480,
        "steps": [
            {"title": "Methodical Disassembly", "step_type": "action", "photo_required": True,
             "instructions": "Disassemble in sequence, preserving orientation marks. Bag and tag small parts."},
            {"title": "Bearing Removal", "step_type": "action", "photo_required": True,
             "instructions": "Record bearing fit type and orientation before removal. Never hammer bearings "
                             "directly."},
            {"title": "Shaft Journal Measurements", "step_type": "measurement",
             "instructions": "Measure journals for diameter, out-of-round, and surface finish at multiple points.",
             "measurements_required": [_m("Journal Diameter", "in"), _m("Out-of-Round", "in", max=0.0005),
                                       _m("Surface Finish", "μin Ra", max=32)]},
            {"title": "Housing Bore Measurements", "step_type": "measurement",
             "instructions": "Measure housing bores for diameter, concentricity, and squareness to the feet.",
             "measurements_required": [_m("Bore Diameter", "in"), _m("Concentricity", "in", max=0.002),
                                       _m("Squareness", "in/ft", max=0.002)]},
            {"title": "Air Gap Uniformity (Motors)", "step_type": "measurement",
             "instructions": "Measure air gap at 8 points around the stator. Target ≤10% variation from average.",
             "measurements_required": [_m("Air Gap Reading", "in"), _m("Variation", "%", max=10)]},
            {"title": "Impeller & Wear Ring Inspection (Pumps)", "step_type": "inspection", "photo_required": True,
             "instructions": "Measure impeller clearances and wear ring fits per ANSI/HI. Check for erosion, "
                             "cavitation or corrosion.",
             "measurements_required": [_m("Impeller Clearance", "in"), _m("Wear Ring Fit", "in")]},
            {"title": "Bearing Condition Analysis", "step_type": "inspection", "photo_required": True,
             "instructions": "Inspect bearings for brinelling, smearing, fluting, fatigue spalling. Record "
                             "probable cause of failure."},
            {"title": "Winding Inspection", "step_type": "inspection", "photo_required": True,
             "instructions": "Inspect windings for discoloration, contamination, cracked varnish, or thermal "
                             "damage."},
            {"title": "Core Inspection", "step_type": "inspection", "photo_required": True,
             "instructions": "Examine stator and rotor cores for hot spots, lamination damage, or looseness."},
            {"title": "Shaft & Rotor Inspection", "step_type": "inspection", "photo_required": True,
             "instructions": "Dye-penetrant test shafts and rotors for cracks. Check keyways, threads and seal "
                             "surfaces."},
            {"title": "Casing Inspection (Pumps)", "step_type": "inspection", "photo_required": True,
             "instructions": "Inspect casings for erosion, pitting, cavitation damage and seal face condition."},
            {"title": "Mechanical Seal Inspection", "step_type": "inspection", "photo_required": True,
             "instructions": "Inspect seal faces, O-rings and springs for wear, heat checking or chemical attack."},
            {"title": "Fastener Inspection", "step_type": "inspection", "photo_required": True,
             "instructions": "Inspect bolts for stretch, corrosion or thread damage. Replace per ASTM A193/A194."},
        ],
    },
    {
        "name": "Determine Repair Scope and Parts Required",
        "procedure_type": "inspection",
        "phase": "repair_scope",
        "estimated_duration_minutes": 45,
        "steps": [
            {"title": "Review Findings", "step_type": "inspection",
             "description": "Review all findings from teardown and inspection",
             "instructions": "Examine all notes, photos, and observations from the teardown phase."},
            {"title": "Document Work Required", "step_type": "inspection",
             "description": "List all repairs, replacements, adjustments, and modifications needed",
             "instructions": "Create a comprehensive list of all work that must be performed."},
            {"title": "List Parts Required", "step_type": "inspection",
             "description": "List all parts required with part numbers, descriptions, and quantities",
             "instructions": "Document each part with manufacturer part number, description, and quantity."},
            {"title": "Photograph Components", "step_type": "inspection", "photo_required": True,
             "description": "Photograph damaged or worn components requiring replacement",
             "instructions": "Take clear photos showing damage or wear that justifies replacement."},
            {"title": "Verify Completeness", "step_type": "inspection",
             "description": "Verify completeness of repair scope and parts list",
             "instructions": "Double-check that all necessary work and parts have been identified."},
        ],
    },
    {
        "name": "Determine Repair Scope & Parts Required",
        "procedure_type": "inspection",
        "phase": "inspection",
        "estimated_duration_minutes": 180,
        "steps": [
            {"title": "Bearing Assessment", "step_type": "decision",
             "instructions": "Determine bearing replacement needs. Specify equal or better ABMA rating and C3/C4 "
                             "clearance per OEM."},
            {"title": "Seal Replacement Specification", "step_type": "decision",
             "instructions": "Specify mechanical seal replacement per API 682 arrangement. Verify flush plan."},
            {"title": "Wear Components Assessment", "step_type": "decision",
             "instructions": "Identify wear rings, bushings and sleeves needing rebuild to ANSI/HI clearances."},
            {"title": "Winding Evaluation", "step_type": "decision",
             "instructions": "If electrical tests failed, plan rewind to OEM turns, Class F or H insulation, VPI."},
            {"title": "Shaft Repair Planning", "step_type": "decision",
             "instructions": "For undersized journals plan spray metal build or sleeve. Specify final grind."},
            {"title": "Hardware & Gasket Specification", "step_type": "action",
             "instructions": "List all gaskets, O-rings and fasteners to replace per ASTM A193/A194."},
            {"title": "Balance Correction Planning", "step_type": "action",
             "instructions": "Plan rebalance of reworked rotating parts to ISO 21940 G2.5 (G1.0 critical)."},
            {"title": "Prepare Parts Requisition", "step_type": "action",
             "instructions": "Compile parts list with quantities, specs and sources. Prepare the repair estimate."},
        ],
    },
    {
        "name": "Equipment Rebuild & Reassembly",
        "procedure_type": "rebuild",
        "phase": "rebuild",
        "estimated_duration_minutes": 720,
        "steps": [
            {"title": "Final Component Cleaning", "step_type": "action",
             "instructions": "Solvent wash, rinse and bake dry all components. Blow dry with clean air."},
            {"title": "Machine Work Verification", "step_type": "measurement",
             "instructions": "Turn journals, sleeve bores and seal lands to spec. Verify flatness ≤0.001 in per "
                             "6 in.",
             "measurements_required": [_m("Flatness", "in", max=0.001), _m("Span", "in", target=6)]},
            {"title": "Bearing Installation", "step_type": "action",
             "instructions": "Heat bearings to 110-120°C. Install on the correct race and confirm interference.",
             "measurements_required": [_m("Bearing Temperature", "°C", min=110, max=120), _m("Axial Endplay", "in")],
             "safety_notes": "Wear heat-resistant gloves. Never exceed 120°C bearing temperature."},
            {"title": "Mechanical Seal Installation", "step_type": "action",
             "instructions": "Follow vendor IOM. Lubricate O-rings with compatible fluid. Keep faces clean.",
             "safety_notes": "Never touch seal faces with bare hands. Use lint-free gloves."},
            {"title": "Motor Rotor Centering", "step_type": "action", "photo_required": True,
             "instructions": "Center rotor in stator. Air gap variation at 8 points must be ≤10% of average.",
             "measurements_required": [_m("Air Gap", "in"), _m("Variation", "%", max=10)]},
            {"title": "Hardware Torque Application", "step_type": "action",
             "instructions": "Torque fasteners to spec with a calibrated wrench in a criss-cross sequence."},
            {"title": "Motor Final Megger & PI", "step_type": "measurement",
             "instructions": "Final insulation resistance and PI after close-up. Meet or exceed initial targets.",
             "measurements_required": [_m("IR Reading", "MΩ", min=10), _m("PI Ratio", min=2.0)]},
            {"title": "Pump Clearances Verification", "step_type": "measurement",
             "instructions": "Install wear rings, impeller, sleeves and keys. Verify axial float and impeller lift.",
             "measurements_required": [_m("Axial Float", "in"), _m("Impeller Clearance", "in")]},
            {"title": "Casing Close-Up", "step_type": "action",
             "instructions": "Install new gaskets. Close the casing with a criss-cross torque pattern."},
            {"title": "Dynamic Balancing", "step_type": "action", "photo_required": True,
             "instructions": "Balance to ISO 21940 G2.5. Record correction grams and angular location.",
             "measurements_required": [_m("Initial Unbalance", "g-in"), _m("Final Unbalance", "g-in", max=0.1),
                                       _m("Correction Mass", "g"), _m("Angle", "degrees")]},
        ],
    },
    {
        "name": "Final Testing & Quality Verification",
        "procedure_type": "test",
        "phase": "final_testing",
        "estimated_duration_minutes": 240,
        "steps": [
            {"title": "Motor No-Load Run Test", "step_type": "measurement",
             "instructions": "Run no-load. Voltage ±1%, current balance ≤10%, vibration per ISO 10816 Zone A/B. "
                             "Monitor temperature rise until stable.",
             "measurements_required": [_m("Voltage", "V"), _m("Current Imbalance", "%", max=10),
                                       _m("Vibration", "in/s", max=0.15), _m("Temperature Rise", "°C")]},
            {"title": "Motor Final Electrical Verification", "step_type": "measurement",
             "instructions": "Final IR and PI check. Save the surge comparison baseline for trending.",
             "measurements_required": [_m("Final IR", "MΩ", min=100), _m("Final PI", min=2.0)]},
            {"title": "Pump Hydrostatic Test", "step_type": "measurement",
             "instructions": "Hydrostatic test at 1.5× MAWP for 5 minutes with no visible leakage.",
             "measurements_required": [_m("Test Pressure", "psi"), _m("MAWP", "psi"),
                                       _m("Test Duration", "min", target=5)],
             "safety_notes": "Stand clear during pressurization. Use proper blinds and pressure relief."},
            {"title": "Pump Performance Test", "step_type": "measurement",
             "instructions": "Measure flow, head, power and efficiency. Acceptance ±5% of the OEM curve.",
             "measurements_required": [_m("Flow Rate", "GPM"), _m("Discharge Head", "ft"), _m("Power", "HP"),
                                       _m("Efficiency", "%"), _m("Curve Deviation", "%", max=5)]},
            {"title": "Vibration & Noise Test", "step_type": "measurement",
             "instructions": "Measure vibration at bearing housings, horizontal, vertical and axial.",
             "measurements_required": [_m("Vibration Horizontal", "in/s", max=0.15),
                                       _m("Vibration Vertical", "in/s", max=0.15),
                                       _m("Vibration Axial", "in/s", max=0.15)]},
            {"title": "Seal Leak Test", "step_type": "measurement",
             "instructions": "Verify no visible seal leakage for 5 minutes at operating pressure.",
             "measurements_required": [_m("Operating Pressure", "psi"), _m("Test Duration", "min", target=5),
                                       _m("Leakage", "drops/min", max=0)]},
            {"title": "Documentation & Certification", "step_type": "action", "photo_required": True,
             "instructions": "Record all test data, spectra and photos. Tag equipment with shop number and "
                             "recommended service interval."},
        ],
    },
]


async def seed(admin_email: str = "", admin_password: str = ""):
    await init_db()

    async with async_session_factory() as db:
        existing_types = {t.name for t in await crud.list_equipment_types(db)}
        for name, category, description in EQUIPMENT_TYPES:
            if name not in existing_types:
                await crud.create_equipment_type(db, name, category, description)
                print(f"Created equipment type: {name}")

        existing = {(t.name, t.phase) for t in await crud.list_procedure_templates(db)}
        for proc in PROCEDURES:
            if (proc["name"], proc["phase"]) in existing:
                print(f"Procedure already exists, skipping: {proc['name']}")
                continue
            fields = {k: v for k, v in proc.items() if k not in ("name", "procedure_type", "phase", "steps")}
            template = await crud.create_procedure_template(
                db, proc["name"], proc["procedure_type"], proc["phase"], proc["steps"], **fields,
            )
            print(f"Created procedure: {template.name} ({template.phase}, {len(template.steps)} steps)")

        if WAREHOUSE not in {w.name for w in await crud.list_warehouses(db)}:
            await crud.create_warehouse(db, WAREHOUSE)
            print(f"Created warehouse: {WAREHOUSE}")
        for part_number, description, category, unit_cost, reorder_level in PARTS:
            if await crud.get_inventory_item_by_part_number(db, part_number):
                continue
            await crud.create_inventory_item(
                db, part_number, description, category=category,
                unit_cost=unit_cost, reorder_level=reorder_level, reorder_quantity=reorder_level * 2,
            )
            print(f"Created inventory item: {part_number}")

        if admin_email:
            if await crud.get_user_by_email(db, admin_email):
                print(f"Admin {admin_email} already exists, skipping.")
            else:
                admin = await crud.create_user(
                    db, admin_email, hash_password(admin_password),
                    full_name="Administrator", role="admin",
                )
                print(f"Created admin user: {admin.email} (id: {admin.id})")

    await engine.dispose()
    print("\nSeed complete. Start the server with: uvicorn repairflow.main:app --reload")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed RepairFlow reference data")
    parser.add_argument("--admin-email", default="")
    parser.add_argument("--admin-password", default="")
    args = parser.parse_args()
    if args.admin_email and len(args.admin_password) < 8:
        parser.error("--admin-password must be at least 8 characters")
    asyncio.run(seed(args.admin_email, args.admin_password))
