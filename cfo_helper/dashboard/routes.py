"""Dashboard API routes.

Endpoints:
- GET /dashboard - Current inputs, latest result, usage counters, history
- PUT /dashboard/inputs - Replace inputs
- POST /dashboard/custom-parameters - Add a custom parameter
- DELETE /dashboard/custom-parameters/{parameter_id} - Remove a custom parameter
- POST /dashboard/simulate - Run the projection
- POST /dashboard/export - Download the PDF report
- GET /dashboard/history - Mock historical series
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from typing import List

from cfo_helper.errors import MissingResultsError, ReportExportError
from cfo_helper.dashboard.registry import get_dashboard_session
from cfo_helper.dashboard.schemas import (
    CustomParameterCreate,
    CustomParameterResponse,
    DashboardState,
    SimulateResponse,
)
from cfo_helper.dashboard.session import DashboardSession
from cfo_helper.simulation.schemas import BoundedSimulationInputs, HistoricalPoint


router = APIRouter()


@router.get("", response_model=DashboardState)
async def get_dashboard(session: DashboardSession = Depends(get_dashboard_session)):
    """Get the full dashboard state."""
    return session.state()


@router.put("/inputs", response_model=DashboardState)
async def update_inputs(
    inputs: BoundedSimulationInputs,
    session: DashboardSession = Depends(get_dashboard_session),
):
    """Replace the simulation inputs. Values outside the slider ranges are rejected."""
    session.update_inputs(inputs)
    return session.state()


@router.post("/custom-parameters", response_model=CustomParameterResponse)
async def add_custom_parameter(
    data: CustomParameterCreate,
    session: DashboardSession = Depends(get_dashboard_session),
):
    try:
        parameter = session.add_custom_parameter(data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return CustomParameterResponse(
        parameter=parameter,
        custom_parameters=session.inputs.custom_parameters,
    )


@router.delete("/custom-parameters/{parameter_id}", status_code=204)
async def remove_custom_parameter(
    parameter_id: str,
    session: DashboardSession = Depends(get_dashboard_session),
):
    try:
        session.remove_custom_parameter(parameter_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Custom parameter not found")
    return Response(status_code=204)


@router.post("/simulate", response_model=SimulateResponse)
async def simulate(session: DashboardSession = Depends(get_dashboard_session)):
    """Run the projection with the current inputs and organization type."""
    results = session.simulate()
    return SimulateResponse(results=results, usage=session.usage)


@router.post("/export")
async def export_report(session: DashboardSession = Depends(get_dashboard_session)):
    """
    Export the latest result and history as a PDF.

    Returns 409 if no simulation has been run yet.
    """
    try:
        pdf = session.export_report()
    except MissingResultsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ReportExportError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="cfo-helper-report.pdf"'},
    )


@router.get("/history", response_model=List[HistoricalPoint])
async def get_history(session: DashboardSession = Depends(get_dashboard_session)):
    return session.history
